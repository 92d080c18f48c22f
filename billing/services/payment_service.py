# billing/services/payment_service.py

"""
PAYMENT SERVICE

Handles the complete purchase flow:
1. Verify the paid amount against the program price
2. Create (or load) the order
3. Approve the payment with the gateway
4. Complete the order and grant the enrollment
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from django.db import transaction
from django.utils import timezone

from billing.models import Order
from billing.services import order_service
from billing.services.enrollment_service import create_enrollment
from billing.services.payment_gateway import TossPaymentsClient
from core.cache import invalidate_paths
from core.exceptions import (
    AmountMismatch,
    ConflictError,
    PaymentApprovalFailed,
    ResourceNotFound,
    ValidationFailed,
)
from programs.models import Program

logger = logging.getLogger(__name__)


def payment_page_path(slug: str) -> str:
    return f"/programs/payment/{slug}"


def compute_end_date(program: Program, now=None):
    """None means lifetime access."""
    if not program.access_period_days:
        return None
    return (now or timezone.now()) + timedelta(days=program.access_period_days)


class PaymentService:

    def __init__(self, gateway: Optional[TossPaymentsClient] = None):
        self.gateway = gateway or TossPaymentsClient()

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _get_program(self, slug: str) -> Program:
        program = Program.objects.select_related("coach").filter(slug=slug).first()
        if program is None:
            raise ResourceNotFound("Program not found.")
        return program

    def _verify_amount(self, program: Program, amount: str) -> None:
        expected = str(program.price)
        if expected != str(amount):
            logger.error(
                f"PAYMENT_AMOUNT_MISMATCH: program={program.id} expected={expected} received={amount}"
            )
            raise AmountMismatch()

    # --------------------------------------------------------
    # Checkout
    # --------------------------------------------------------

    def init_purchase(self, user, slug: str) -> Dict[str, Any]:
        if user is None or not user.is_authenticated:
            return {
                "success": False,
                "redirect": f"/auth/signin?next={payment_page_path(slug)}",
            }

        program = self._get_program(slug)
        if not program.is_for_sale:
            raise ResourceNotFound("This program is not for sale.")

        if not user.email:
            raise ValidationFailed("An email address is required to purchase.")

        return {
            "success": True,
            "program": {
                "id": str(program.id),
                "title": program.title,
                "price": str(program.price),
                "type": program.type,
                "slug": program.slug,
                "access_period_days": program.access_period_days,
            },
            "buyer": {
                "id": str(user.id),
                "email": user.email,
                "full_name": user.full_name or "",
            },
            "client_key": self.gateway.client_key,
        }

    def get_client_key(self) -> Dict[str, Any]:
        client_key = self.gateway.client_key
        return {"success": bool(client_key), "client_key": client_key or ""}

    def create_payment(self, user, program_slug: str, payment_key: str, amount: str,
                       order_id=None) -> Dict[str, Any]:
        program = self._get_program(program_slug)
        self._verify_amount(program, amount)

        if order_id is None:
            order = order_service.create_order(user, program, amount, payment_key=payment_key)
        else:
            order = order_service.get_own_order(user, order_id)
            if order.status != Order.Status.PENDING:
                raise ValidationFailed("Order is not pending.")
            if Order.objects.filter(payment_key=payment_key).exclude(id=order.id).exists():
                raise ConflictError("This payment has already been used for another order.")

        approval = self.gateway.approve(payment_key, str(order.id), str(amount))
        if not approval.success:
            order_service.mark_cancelled(order)
            raise PaymentApprovalFailed(approval.error or PaymentApprovalFailed.default_detail)

        order_service.complete_order_and_create_enrollment(
            order.id,
            payment_key,
            compute_end_date(program),
        )

        invalidate_paths(payment_page_path(program_slug), "/user/orders", "/user/program")
        logger.info(f"PAYMENT_COMPLETED: order={order.id} buyer={user.id} program={program.id}")

        return {
            "success": True,
            "order_id": str(order.id),
            "redirect_url": f"/programs/success?orderId={order.id}",
        }

    def process_payment_success(self, user, payment_key: str, gateway_order_id: str,
                                amount: str, program_slug: str) -> Dict[str, Any]:
        """
        Widget success callback: the gateway order id is client-generated,
        so the order is created only after approval.

        The payment_key row is locked before approval. A key that already
        belongs to this buyer is completed (or replayed); a key held by
        another buyer or program is a conflict and never reaches the gateway.
        """
        program = self._get_program(program_slug)
        self._verify_amount(program, amount)

        with transaction.atomic():
            existing = (
                Order.objects
                .select_for_update()
                .filter(payment_key=payment_key)
                .first()
            )

            if existing is not None:
                if existing.buyer_id != user.id or existing.program_id != program.id:
                    logger.warning(
                        f"PAYMENT_KEY_CONFLICT: order={existing.id} buyer={user.id} program={program.id}"
                    )
                    raise ConflictError("This payment has already been used for another order.")

                if existing.status == Order.Status.COMPLETED:
                    logger.info(f"PAYMENT_SUCCESS_REPLAY: order={existing.id}")
                    return self._success_payload(existing, program)

            approval = self.gateway.approve(payment_key, gateway_order_id, str(amount))
            if not approval.success:
                raise PaymentApprovalFailed(approval.error or PaymentApprovalFailed.default_detail)

            if existing is not None:
                order_service.complete_order_and_create_enrollment(
                    existing.id,
                    payment_key,
                    compute_end_date(program),
                )
                order = existing
            else:
                order = order_service.create_order(
                    user, program, amount,
                    payment_key=payment_key,
                    status=Order.Status.COMPLETED,
                )
                create_enrollment(
                    user=user,
                    program=program,
                    order=order,
                    end_date=compute_end_date(program),
                )

        invalidate_paths(payment_page_path(program_slug), "/user/orders", "/user/program")
        logger.info(f"PAYMENT_SUCCESS: order={order.id} buyer={user.id} program={program.id}")
        return self._success_payload(order, program)

    @staticmethod
    def _success_payload(order: Order, program: Program) -> Dict[str, Any]:
        return {
            "success": True,
            "order_id": str(order.id),
            "program_id": str(program.id),
            "program_slug": program.slug,
        }
