# progress/services/section_record_service.py

"""
SECTION RECORD SERVICE

One record per (user, section item). Submitting again overwrites the
content and refreshes completed_at.
"""

import logging
from typing import Any, Dict

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from billing.models import Enrollment
from core.cache import invalidate_paths
from core.exceptions import PermissionDeniedError, ResourceNotFound, ValidationFailed
from programs.models import BlueprintSectionItem
from progress.models import SectionRecord
from users.models import UserProfile

logger = logging.getLogger(__name__)

MEMBER_PROGRAM_PATH = "/user/program"


class SectionRecordService:

    def _queryset(self):
        return SectionRecord.objects.select_related(
            "user",
            "section",
            "section_item",
            "section_item__blueprint",
            "section_item__blueprint__program",
        )

    def _get(self, record_id) -> SectionRecord:
        try:
            return self._queryset().get(id=record_id)
        except (SectionRecord.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Record not found.")

    def _get_own(self, user, record_id) -> SectionRecord:
        record = self._get(record_id)
        if record.user_id != user.id:
            raise PermissionDeniedError()
        return record

    def _get_coached(self, coach, record_id) -> SectionRecord:
        record = self._get(record_id)
        if record.section_item.blueprint.program.coach_id != coach.id:
            raise PermissionDeniedError()
        return record

    # --------------------------------------------------------
    # Member
    # --------------------------------------------------------

    @transaction.atomic
    def create_or_update(self, user, section_item_id, content: Dict[str, Any]) -> SectionRecord:
        try:
            item = (
                BlueprintSectionItem.objects
                .select_related("section", "blueprint")
                .get(id=section_item_id)
            )
        except (BlueprintSectionItem.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Section not found.")

        enrolled = Enrollment.objects.filter(user=user, program_id=item.blueprint.program_id).exists()
        if not enrolled:
            raise PermissionDeniedError()

        profile = UserProfile.objects.filter(account=user).first()
        if profile is None:
            raise ValidationFailed("Profile not found. Complete onboarding first.")

        record, created = SectionRecord.objects.select_for_update().get_or_create(
            user=user,
            section_item=item,
            defaults={
                "user_profile": profile,
                "section": item.section,
                "content": content,
                "completed_at": timezone.now(),
            },
        )
        if not created:
            record.content = content
            record.completed_at = timezone.now()
            record.save(update_fields=["content", "completed_at", "updated_at"])

        invalidate_paths(MEMBER_PROGRAM_PATH)
        return record

    def get_my_records(self, user):
        return self._queryset().filter(user=user).order_by("-completed_at")

    def get_detail(self, user, record_id) -> SectionRecord:
        return self._get_own(user, record_id)

    def update(self, user, record_id, content: Dict[str, Any]) -> SectionRecord:
        record = self._get_own(user, record_id)
        record.content = content
        record.completed_at = timezone.now()
        record.save(update_fields=["content", "completed_at", "updated_at"])
        invalidate_paths(MEMBER_PROGRAM_PATH)
        return record

    def delete(self, user, record_id) -> None:
        self._get_own(user, record_id).delete()
        invalidate_paths(MEMBER_PROGRAM_PATH)

    # --------------------------------------------------------
    # Coach
    # --------------------------------------------------------

    def get_records_by_program_day(self, coach, program, phase_number: int, day_number: int):
        if program.coach_id != coach.id:
            raise PermissionDeniedError()

        return (
            self._queryset()
            .filter(
                section_item__blueprint__program=program,
                section_item__blueprint__phase_number=phase_number,
                section_item__blueprint__day_number=day_number,
            )
            .order_by("-completed_at")
        )

    def update_coach_comment(self, coach, record_id, comment) -> SectionRecord:
        record = self._get_coached(coach, record_id)
        record.coach_comment = comment or None
        record.save(update_fields=["coach_comment", "updated_at"])
        invalidate_paths("/coach/dashboard")
        return record

    def delete_by_coach(self, coach, record_id) -> None:
        record = self._get_coached(coach, record_id)
        logger.info(f"Section record {record.id} deleted by coach {coach.id}")
        record.delete()
