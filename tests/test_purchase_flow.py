# tests/test_purchase_flow.py

"""
End-to-end flow across apps: a member buys a program, trains on it,
and the coach reviews the work.
"""

from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from billing.models import Enrollment, Order
from billing.services.payment_gateway import ApprovalResult
from progress.models import WorkoutLog
from tests.factories import (
    make_blueprint,
    make_coach,
    make_library,
    make_member,
    make_program,
    make_section_item,
)

APPROVE = "billing.services.payment_gateway.TossPaymentsClient.approve"


class PurchaseToReviewFlowTests(TestCase):

    def setUp(self):
        self.coach = make_coach()
        self.program = make_program(self.coach, title="Engine Builder", price=79000)
        self.blueprint = make_blueprint(self.program, 1, 1)
        self.item = make_section_item(self.blueprint, title="Benchmark", is_recordable=True)
        self.library = make_library("Row 2k")

        self.member = make_member(full_name="Dana Yoon")
        self.member_client = APIClient()
        self.member_client.force_authenticate(self.member)
        self.coach_client = APIClient()
        self.coach_client.force_authenticate(self.coach)

    def _record_benchmark(self):
        return self.member_client.post("/api/progress/section-records/", {
            "section_item_id": str(self.item.id),
            "content": {"time": "7:12"},
        }, format="json")

    @mock.patch(APPROVE, return_value=ApprovalResult(True, data={"status": "DONE"}))
    def test_buy_train_and_review(self, approve):
        # Not enrolled yet
        self.assertEqual(self._record_benchmark().status_code, 403)
        response = self.member_client.get(f"/api/billing/enrollments/check/{self.program.id}/")
        self.assertFalse(response.data["data"]["enrolled"])

        # Checkout
        response = self.member_client.get(f"/api/billing/purchase/{self.program.slug}/init/")
        self.assertEqual(response.data["client_key"], "test_ck_client")

        response = self.member_client.post("/api/billing/payments/success/", {
            "program_slug": self.program.slug,
            "payment_key": "pk_flow",
            "order_id": "widget-order-1",
            "amount": "79000",
        }, format="json")
        self.assertEqual(response.status_code, 201)
        approve.assert_called_once_with("pk_flow", "widget-order-1", "79000")

        order = Order.objects.get(payment_key="pk_flow")
        self.assertEqual(order.status, Order.Status.COMPLETED)
        self.assertEqual(order.coach, self.coach)
        enrollment = Enrollment.objects.get(user=self.member, program=self.program)
        self.assertEqual(enrollment.order, order)
        self.assertIsNotNone(enrollment.end_date)

        response = self.member_client.get(f"/api/billing/enrollments/check/{self.program.id}/")
        self.assertTrue(response.data["data"]["enrolled"])

        # Training
        self.assertEqual(self._record_benchmark().status_code, 201)
        response = self.member_client.post("/api/progress/workout-logs/", {
            "library": str(self.library.id),
            "blueprint": str(self.blueprint.id),
            "content": {"distance": 2000},
            "total_duration": 432,
        }, format="json")
        self.assertEqual(response.status_code, 201)
        log_id = response.data["data"]["id"]

        # Coach review
        base = f"/api/members/programs/{self.program.id}/"
        stats = self.coach_client.get(f"{base}dashboard/").data["data"]
        self.assertEqual(stats["total_sales"], 1)
        self.assertEqual(stats["active_users"], 1)
        self.assertEqual(stats["completion_rate"], 100.0)

        homework = self.coach_client.get(f"{base}homework/1/1/").data["data"]
        self.assertEqual(homework["submissions"][0]["id"], str(log_id))

        response = self.coach_client.post(f"/api/progress/coach/workout-logs/{log_id}/toggle-check/")
        self.assertTrue(response.data["data"]["is_checked_by_coach"])
        response = self.coach_client.patch(
            f"/api/progress/coach/workout-logs/{log_id}/comment/", {"comment": "Negative split next time"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)

        comments = self.coach_client.get(f"{base}{self.member.id}/comments/").data["data"]
        self.assertEqual(comments["workout_logs"][0]["coach_comment"], "Negative split next time")
        self.assertTrue(WorkoutLog.objects.get(id=log_id).is_checked_by_coach)

    @mock.patch(APPROVE, return_value=ApprovalResult(True, data={"status": "DONE"}))
    def test_success_callback_replay_is_idempotent(self, approve):
        payload = {
            "program_slug": self.program.slug,
            "payment_key": "pk_replay",
            "order_id": "widget-order-2",
            "amount": "79000",
        }

        first = self.member_client.post("/api/billing/payments/success/", payload, format="json")
        second = self.member_client.post("/api/billing/payments/success/", payload, format="json")

        self.assertEqual(first.data["order_id"], second.data["order_id"])
        self.assertEqual(approve.call_count, 1)
        self.assertEqual(Enrollment.objects.filter(user=self.member).count(), 1)
