# members/services/member_service.py

"""
MEMBER SERVICE

Coach-side view of the members enrolled in a program. Callers pass a
program already verified with get_owned_program(); enrollment-level
operations verify ownership through the enrollment's program.
"""

import logging
from datetime import datetime, date, time, timedelta
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Count, Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from billing.models import Enrollment, Order
from billing.services.enrollment_service import get_enrollments_by_program
from core.cache import invalidate_paths
from core.exceptions import PermissionDeniedError, ResourceNotFound, ValidationFailed
from progress.models import SectionRecord, WorkoutLog
from progress.services.performance import extract_pr_from_logs

logger = logging.getLogger(__name__)

MEMBER_PATHS = ("/coach/dashboard", "/coach/members")


# ============================================================
# SERIALIZATION
# ============================================================

def serialize_member(user) -> Dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
        "avatar_url": user.avatar_url,
        "role": user.role,
        "created_at": user.created_at,
    }


def serialize_enrollment(enrollment: Enrollment) -> Dict[str, Any]:
    return {
        "id": str(enrollment.id),
        "status": enrollment.status,
        "start_date": enrollment.start_date,
        "end_date": enrollment.end_date,
        "created_at": enrollment.created_at,
        "user": serialize_member(enrollment.user),
        "program": {"id": str(enrollment.program_id), "title": enrollment.program.title},
    }


def serialize_order(order: Order) -> Dict[str, Any]:
    return {
        "id": str(order.id),
        "amount": str(order.amount),
        "status": order.status,
        "created_at": order.created_at,
        "program": {"id": str(order.program_id), "title": order.program.title, "type": order.program.type},
    }


def serialize_log(log: WorkoutLog) -> Dict[str, Any]:
    return {
        "id": str(log.id),
        "library": {"id": str(log.library_id), "title": log.library.title},
        "blueprint_id": str(log.blueprint_id) if log.blueprint_id else None,
        "log_date": log.log_date,
        "content": log.content,
        "intensity": log.intensity,
        "max_weight": log.max_weight,
        "total_volume": log.total_volume,
        "total_duration": log.total_duration,
        "coach_comment": log.coach_comment,
        "is_checked_by_coach": log.is_checked_by_coach,
    }


def parse_when(value) -> Optional[datetime]:
    """Accept a datetime, a date or an ISO string. Naive values use the current timezone."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        try:
            parsed = parse_datetime(str(value))
            if parsed is None:
                day = parse_date(str(value))
                parsed = datetime.combine(day, time.min) if day else None
        except ValueError:
            parsed = None
        if parsed is None:
            raise ValidationFailed("Invalid date format.")

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


class MemberService:

    def _enrollments(self, program):
        return get_enrollments_by_program(program).select_related("program")

    def _get_member_enrollment(self, program, member_id) -> Enrollment:
        enrollment = (
            self._enrollments(program)
            .select_related("order", "user__user_profile")
            .filter(user_id=member_id)
            .first()
        )
        if enrollment is None:
            raise ResourceNotFound("Member not found.")
        return enrollment

    def _get_coached_enrollment(self, coach, enrollment_id) -> Enrollment:
        try:
            enrollment = Enrollment.objects.select_related("program", "user").get(id=enrollment_id)
        except (Enrollment.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Enrollment not found.")
        if enrollment.program.coach_id != coach.id:
            logger.warning(f"Coach {coach.id} denied access to enrollment {enrollment_id}")
            raise PermissionDeniedError()
        return enrollment

    # --------------------------------------------------------
    # Listing
    # --------------------------------------------------------

    def get_members(self, program):
        return [serialize_enrollment(e) for e in self._enrollments(program)]

    def search_members(self, program, term: str):
        term = (term or "").strip()
        qs = self._enrollments(program)
        if term:
            qs = qs.filter(Q(user__full_name__icontains=term) | Q(user__email__icontains=term))
        return [serialize_enrollment(e) for e in qs]

    def get_member_detail(self, program, member_id) -> Dict[str, Any]:
        enrollment = self._get_member_enrollment(program, member_id)
        profile = getattr(enrollment.user, "user_profile", None)

        return {
            "enrollment": serialize_enrollment(enrollment),
            "user": serialize_member(enrollment.user),
            "program": {
                "id": str(program.id),
                "title": program.title,
                "type": program.type,
                "access_period_days": program.access_period_days,
            },
            "order": serialize_order(enrollment.order) if enrollment.order_id else None,
            "user_profile": {
                "nickname": profile.nickname,
                "phone_number": profile.phone_number,
                "fitness_level": profile.fitness_level,
                "fitness_goals": profile.fitness_goals,
                "onboarding_data": profile.onboarding_data,
            } if profile else None,
        }

    def get_member_orders(self, coach, member_id):
        orders = (
            Order.objects
            .filter(buyer_id=member_id, coach=coach)
            .select_related("program")
            .order_by("-created_at")
        )
        return [serialize_order(o) for o in orders]

    def get_expiring_members(self, program, days: int = 7):
        now = timezone.now()
        qs = self._enrollments(program).filter(
            status=Enrollment.Status.ACTIVE,
            end_date__gte=now,
            end_date__lte=now + timedelta(days=days),
        ).order_by("end_date")
        return [serialize_enrollment(e) for e in qs]

    def get_member_stats(self, program) -> Dict[str, int]:
        counts = {
            row["status"]: row["n"]
            for row in (
                Enrollment.objects
                .filter(program=program)
                .order_by()
                .values("status")
                .annotate(n=Count("id"))
            )
        }
        stats = {status: counts.get(status, 0) for status in Enrollment.Status.values}
        stats["total"] = sum(stats.values())
        return stats

    # --------------------------------------------------------
    # Enrollment management
    # --------------------------------------------------------

    def update_enrollment_status(self, coach, enrollment_id, status: str) -> Enrollment:
        if status not in Enrollment.Status.values:
            raise ValidationFailed(f"Invalid enrollment status: {status}")

        enrollment = self._get_coached_enrollment(coach, enrollment_id)
        enrollment.status = status
        enrollment.save(update_fields=["status", "updated_at"])

        invalidate_paths(*MEMBER_PATHS)
        logger.info(f"Enrollment {enrollment.id} status -> {status} by coach {coach.id}")
        return enrollment

    def extend_enrollment(self, coach, enrollment_id, end_date) -> Enrollment:
        if not end_date:
            raise ValidationFailed("End date is required.")
        parsed = parse_when(end_date)

        enrollment = self._get_coached_enrollment(coach, enrollment_id)
        enrollment.end_date = parsed
        enrollment.save(update_fields=["end_date", "updated_at"])

        invalidate_paths(*MEMBER_PATHS)
        return enrollment

    def update_enrollment_start_date(self, coach, enrollment_id, start_date) -> Enrollment:
        enrollment = self._get_coached_enrollment(coach, enrollment_id)
        enrollment.start_date = parse_when(start_date)
        enrollment.save(update_fields=["start_date", "updated_at"])
        invalidate_paths(*MEMBER_PATHS)
        return enrollment

    def update_enrollment_end_date(self, coach, enrollment_id, end_date) -> Enrollment:
        enrollment = self._get_coached_enrollment(coach, enrollment_id)
        enrollment.end_date = parse_when(end_date)
        enrollment.save(update_fields=["end_date", "updated_at"])
        invalidate_paths(*MEMBER_PATHS)
        return enrollment

    # --------------------------------------------------------
    # Training data
    # --------------------------------------------------------

    def _program_logs(self, program, member_id):
        return (
            WorkoutLog.objects
            .filter(user_id=member_id, blueprint__program=program)
            .select_related("library", "blueprint")
            .order_by("-log_date")
        )

    def get_member_workout_logs(self, program, member_id) -> Dict[str, Any]:
        enrollment = self._get_member_enrollment(program, member_id)
        return {
            "member": serialize_member(enrollment.user),
            "logs": [serialize_log(log) for log in self._program_logs(program, member_id)],
        }

    def get_member_coach_comments(self, program, member_id) -> Dict[str, Any]:
        self._get_member_enrollment(program, member_id)

        logs = self._program_logs(program, member_id).exclude(
            Q(coach_comment__isnull=True) | Q(coach_comment="")
        )
        records = (
            SectionRecord.objects
            .filter(user_id=member_id, section_item__blueprint__program=program)
            .exclude(Q(coach_comment__isnull=True) | Q(coach_comment=""))
            .select_related("section", "section_item__blueprint")
            .order_by("-completed_at")
        )
        return {
            "workout_logs": [serialize_log(log) for log in logs],
            "section_records": [
                {
                    "id": str(r.id),
                    "section_title": r.section.title,
                    "label": r.section_item.blueprint.label,
                    "content": r.content,
                    "completed_at": r.completed_at,
                    "coach_comment": r.coach_comment,
                }
                for r in records
            ],
        }

    def get_member_pr_history(self, program, member_id, library_id=None):
        self._get_member_enrollment(program, member_id)
        logs = WorkoutLog.objects.filter(user_id=member_id).select_related("library")
        progress = extract_pr_from_logs(logs, library_id)
        return [item.to_dict() for item in progress.values()]

    def get_member_current_prs(self, program, member_id):
        self._get_member_enrollment(program, member_id)
        logs = WorkoutLog.objects.filter(user_id=member_id).select_related("library")
        progress = extract_pr_from_logs(logs)
        return [
            {
                "exercise_id": item.exercise_id,
                "exercise_name": item.exercise_name,
                "category": item.category,
                "current_pr": item.current_pr,
                "growth_rate": item.growth_rate,
                "total_workouts": item.total_workouts,
            }
            for item in sorted(progress.values(), key=lambda p: p.current_pr, reverse=True)
        ]
