# billing/services/enrollment_service.py

"""
ENROLLMENT SERVICE

An enrollment grants access to a program. Access holds while the
enrollment is ACTIVE and end_date is empty or in the future.
"""

import logging
from datetime import datetime
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from billing.models import Enrollment
from core.exceptions import ResourceNotFound, ValidationFailed

logger = logging.getLogger(__name__)


def _access_filter(now=None) -> Q:
    now = now or timezone.now()
    return Q(status=Enrollment.Status.ACTIVE) & (Q(end_date__isnull=True) | Q(end_date__gt=now))


def create_enrollment(user, program, order=None, end_date=None,
                      status: str = Enrollment.Status.ACTIVE) -> Enrollment:
    enrollment = Enrollment.objects.create(
        user=user,
        program=program,
        order=order,
        end_date=end_date,
        status=status,
    )
    logger.info(f"ENROLLMENT_CREATED: {enrollment.id} user={user.id} program={program.id}")
    return enrollment


def get_enrollments(user):
    return (
        Enrollment.objects
        .filter(user=user)
        .select_related("program", "program__coach", "order")
        .order_by("-created_at")
    )


def get_active_enrollments(user):
    return get_enrollments(user).filter(_access_filter())


def check_enrollment(user, program) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    return Enrollment.objects.filter(_access_filter(), user=user, program=program).exists()


def get_enrollments_by_program(program):
    return (
        Enrollment.objects
        .filter(program=program)
        .select_related("user", "order")
        .order_by("-created_at")
    )


def update_enrollment_status(enrollment_id, status: str) -> Enrollment:
    if status not in Enrollment.Status.values:
        raise ValidationFailed(f"Invalid enrollment status: {status}")

    try:
        enrollment = Enrollment.objects.get(id=enrollment_id)
    except (Enrollment.DoesNotExist, ValueError, DjangoValidationError):
        raise ResourceNotFound("Enrollment not found.")

    enrollment.status = status
    enrollment.save(update_fields=["status", "updated_at"])
    return enrollment


@transaction.atomic
def expire_overdue_enrollments(now: Optional[datetime] = None) -> int:
    """Mark ACTIVE enrollments past their end_date as EXPIRED. Returns the count."""
    now = now or timezone.now()
    expired = (
        Enrollment.objects
        .filter(status=Enrollment.Status.ACTIVE, end_date__isnull=False, end_date__lte=now)
        .update(status=Enrollment.Status.EXPIRED, updated_at=now)
    )
    if expired:
        logger.info(f"ENROLLMENTS_EXPIRED: {expired}")
    return expired
