# progress/services/workout_log_service.py

"""
WORKOUT LOG SERVICE

Member side: CRUD on their own logs.
Coach side: read a member's logs and leave feedback, limited to
members enrolled in the coach's programs.
"""

import logging
from typing import Any, Dict

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from billing.models import Enrollment
from core.cache import invalidate_paths
from core.exceptions import PermissionDeniedError, ResourceNotFound
from progress.models import WorkoutLog

logger = logging.getLogger(__name__)

MEMBER_LOGS_PATH = "/user/workout-logs"
COACH_DASHBOARD_PATH = "/coach/dashboard"

MEMBER_EDITABLE_FIELDS = {
    "library", "blueprint", "log_date", "content", "intensity",
    "max_weight", "total_volume", "total_duration",
}


class WorkoutLogService:

    def _queryset(self):
        return WorkoutLog.objects.select_related("library", "blueprint", "blueprint__program")

    def _get(self, log_id) -> WorkoutLog:
        try:
            return self._queryset().get(id=log_id)
        except (WorkoutLog.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Workout log not found.")

    def _get_own(self, user, log_id) -> WorkoutLog:
        log = self._get(log_id)
        if log.user_id != user.id:
            raise PermissionDeniedError()
        return log

    # --------------------------------------------------------
    # Member
    # --------------------------------------------------------

    def create(self, user, data: Dict[str, Any]) -> WorkoutLog:
        fields = {k: v for k, v in data.items() if k in MEMBER_EDITABLE_FIELDS}
        log = WorkoutLog.objects.create(user=user, **fields)
        invalidate_paths(MEMBER_LOGS_PATH)
        logger.info(f"Workout log created: {log.id} by user {user.id}")
        return log

    def get_my_logs(self, user):
        return self._queryset().filter(user=user).order_by("-log_date", "-created_at")

    def get_detail(self, user, log_id) -> WorkoutLog:
        return self._get_own(user, log_id)

    def update(self, user, log_id, data: Dict[str, Any]) -> WorkoutLog:
        log = self._get_own(user, log_id)
        # coach_comment / is_checked_by_coach are coach-only
        for name, value in data.items():
            if name in MEMBER_EDITABLE_FIELDS:
                setattr(log, name, value)
        log.save()
        invalidate_paths(MEMBER_LOGS_PATH)
        return log

    def delete(self, user, log_id) -> None:
        self._get_own(user, log_id).delete()
        invalidate_paths(MEMBER_LOGS_PATH)

    # --------------------------------------------------------
    # Coach
    # --------------------------------------------------------

    def get_member_logs_for_coach(self, coach, member_id):
        enrollments = Enrollment.objects.filter(user_id=member_id)
        if not enrollments.exists():
            return self._queryset().none()

        if not enrollments.filter(program__coach=coach).exists():
            logger.warning(f"Coach {coach.id} denied access to logs of member {member_id}")
            raise PermissionDeniedError()

        return self._queryset().filter(user_id=member_id).order_by("-log_date", "-created_at")

    def _check_coach_owns(self, coach, log: WorkoutLog) -> None:
        if log.blueprint_id and log.blueprint.program.coach_id != coach.id:
            raise PermissionDeniedError()

    def update_coach_comment(self, coach, log_id, comment) -> WorkoutLog:
        log = self._get(log_id)
        self._check_coach_owns(coach, log)

        log.coach_comment = comment or None
        log.save(update_fields=["coach_comment", "updated_at"])
        invalidate_paths(COACH_DASHBOARD_PATH)
        return log

    @transaction.atomic
    def toggle_coach_check(self, coach, log_id) -> WorkoutLog:
        log = self._get(log_id)
        self._check_coach_owns(coach, log)

        log = WorkoutLog.objects.select_for_update().get(id=log.id)
        log.is_checked_by_coach = not log.is_checked_by_coach
        log.save(update_fields=["is_checked_by_coach", "updated_at"])
        invalidate_paths(COACH_DASHBOARD_PATH)
        return log
