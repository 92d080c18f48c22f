# billing/tests/test_billing_api.py

from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from billing.models import Enrollment, Order
from billing.services.payment_gateway import ApprovalResult
from tests.factories import (
    make_coach,
    make_enrollment,
    make_member,
    make_order,
    make_program,
)

APPROVE = "billing.services.payment_gateway.TossPaymentsClient.approve"


class BillingAPITests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.coach = make_coach()
        self.member = make_member()
        self.program = make_program(self.coach, price=50000)
        self.client.force_authenticate(self.member)

    def test_init_purchase_anonymous_redirect(self):
        response = APIClient().get(f"/api/billing/purchase/{self.program.slug}/init/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["success"])
        self.assertIn("/auth/signin?next=", response.data["redirect"])

    def test_init_purchase_unknown_program(self):
        response = self.client.get("/api/billing/purchase/no-such-program/init/")

        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["error_code"], "not_found")

    @mock.patch(APPROVE, return_value=ApprovalResult(True, data={"status": "DONE"}))
    def test_create_payment(self, approve):
        response = self.client.post("/api/billing/payments/", {
            "program_slug": self.program.slug,
            "payment_key": "pk_api",
            "amount": "50000",
        }, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["success"])
        self.assertTrue(Enrollment.objects.filter(user=self.member, program=self.program).exists())

    @mock.patch(APPROVE)
    def test_create_payment_amount_mismatch(self, approve):
        response = self.client.post("/api/billing/payments/", {
            "program_slug": self.program.slug,
            "payment_key": "pk_api",
            "amount": "100",
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error_code"], "amount_mismatch")
        self.assertEqual(response.data["message"], "Payment amount does not match")
        approve.assert_not_called()

    @mock.patch(APPROVE, return_value=ApprovalResult(False, error="Card declined"))
    def test_create_payment_declined(self, approve):
        response = self.client.post("/api/billing/payments/", {
            "program_slug": self.program.slug,
            "payment_key": "pk_declined",
            "amount": "50000",
        }, format="json")

        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.data["message"], "Card declined")
        self.assertEqual(response.data["error_code"], "payment_approval_failed")
        self.assertFalse(response.data["success"])
        self.assertEqual(Order.objects.get(payment_key="pk_declined").status, Order.Status.CANCELLED)
        self.assertFalse(Enrollment.objects.exists())

    @mock.patch(APPROVE, return_value=ApprovalResult(True, data={"status": "DONE"}))
    def test_success_callback_with_key_of_other_buyer(self, approve):
        make_order(make_member(), self.program, status=Order.Status.CANCELLED, payment_key="pk_same")

        response = self.client.post("/api/billing/payments/success/", {
            "program_slug": self.program.slug,
            "payment_key": "pk_same",
            "order_id": "widget-order-9",
            "amount": "50000",
        }, format="json")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error_code"], "conflict")
        approve.assert_not_called()

    def test_payment_requires_authentication(self):
        response = APIClient().post("/api/billing/payments/", {}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_my_orders_only(self):
        make_order(self.member, self.program)
        make_order(make_member(), self.program)

        response = self.client.get("/api/billing/orders/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["data"]), 1)

    def test_create_order_is_pending(self):
        response = self.client.post("/api/billing/orders/", {
            "program_id": str(self.program.id),
            "amount": "50000",
        }, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["data"]["status"], Order.Status.PENDING)

    def test_order_detail_of_other_user_forbidden(self):
        order = make_order(make_member(), self.program)

        response = self.client.get(f"/api/billing/orders/{order.id}/")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["message"], "You do not have permission.")

    def test_order_status_update(self):
        order = make_order(self.member, self.program, status=Order.Status.PENDING)

        response = self.client.patch(
            f"/api/billing/orders/{order.id}/status/", {"status": "CANCELLED"}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.Status.CANCELLED)

    def test_enrollment_check(self):
        url = f"/api/billing/enrollments/check/{self.program.id}/"
        self.assertFalse(self.client.get(url).data["data"]["enrolled"])

        make_enrollment(self.member, self.program, days=30)
        self.assertTrue(self.client.get(url).data["data"]["enrolled"])

    def test_active_enrollments(self):
        make_enrollment(self.member, self.program, days=-1)
        make_enrollment(self.member, make_program(self.coach, title="Second"), days=5)

        response = self.client.get("/api/billing/enrollments/active/")

        self.assertEqual(len(response.data["data"]), 1)
        self.assertEqual(len(self.client.get("/api/billing/enrollments/").data["data"]), 2)
