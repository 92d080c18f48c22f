# billing/services/order_service.py

"""
ORDER SERVICE

Order lifecycle: PENDING -> COMPLETED (payment approved) or CANCELLED.
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from billing.models import Enrollment, Order
from billing.services.enrollment_service import create_enrollment
from core.exceptions import ConflictError, PermissionDeniedError, ResourceNotFound, ValidationFailed

logger = logging.getLogger(__name__)


def create_order(user, program, amount, payment_key=None,
                 status: str = Order.Status.PENDING) -> Order:
    try:
        with transaction.atomic():
            order = Order.objects.create(
                buyer=user,
                program=program,
                coach_id=program.coach_id,
                amount=Decimal(str(amount)),
                status=status,
                payment_key=payment_key,
            )
    except IntegrityError:
        logger.warning(f"ORDER_PAYMENT_KEY_TAKEN: buyer={user.id} program={program.id}")
        raise ConflictError("An order with this payment key already exists.")
    logger.info(f"ORDER_CREATED: {order.id} buyer={user.id} program={program.id} status={status}")
    return order


def get_own_order(user, order_id) -> Order:
    try:
        order = Order.objects.select_related("program", "coach").get(id=order_id)
    except (Order.DoesNotExist, ValueError, DjangoValidationError):
        raise ResourceNotFound("Order not found")

    if order.buyer_id != user.id:
        logger.warning(f"Order access denied: user={user.id} order={order_id}")
        raise PermissionDeniedError()
    return order


def update_order_status(user, order_id, status: str) -> Order:
    if status not in Order.Status.values:
        raise ValidationFailed(f"Invalid order status: {status}")

    order = get_own_order(user, order_id)
    order.status = status
    order.save(update_fields=["status", "updated_at"])
    return order


def mark_cancelled(order: Order) -> None:
    order.status = Order.Status.CANCELLED
    order.save(update_fields=["status", "updated_at"])
    logger.warning(f"ORDER_CANCELLED: {order.id}")


def get_my_orders(user):
    return (
        Order.objects
        .filter(buyer=user)
        .select_related("program", "coach")
        .order_by("-created_at")
    )


def get_order_detail(user, order_id) -> Order:
    return get_own_order(user, order_id)


def get_orders_by_coach(coach):
    return (
        Order.objects
        .filter(coach=coach)
        .select_related("program", "buyer")
        .order_by("-created_at")
    )


@transaction.atomic
def complete_order_and_create_enrollment(order_id, payment_key: str, end_date=None) -> Enrollment:
    """
    Mark the order COMPLETED and grant an ACTIVE enrollment.

    Idempotent: a second call for a completed order returns the
    existing enrollment.
    """
    try:
        order = (
            Order.objects
            .select_for_update()
            .select_related("program", "buyer")
            .get(id=order_id)
        )
    except (Order.DoesNotExist, ValueError, DjangoValidationError):
        raise ResourceNotFound("Order not found")

    if order.status == Order.Status.COMPLETED:
        existing = order.enrollments.order_by("created_at").first()
        if existing is not None:
            logger.info(f"ORDER_ALREADY_COMPLETED: {order.id}")
            return existing

    order.status = Order.Status.COMPLETED
    order.payment_key = payment_key
    order.save(update_fields=["status", "payment_key", "updated_at"])

    return create_enrollment(
        user=order.buyer,
        program=order.program,
        order=order,
        end_date=end_date,
    )
