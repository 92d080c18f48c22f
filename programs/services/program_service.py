# programs/services/program_service.py

"""
PROGRAM SERVICE

Coach-side program CRUD plus the public (slug) lookup.
Every coach operation goes through get_owned_program().
"""

import logging
import uuid
from typing import Any, Dict

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from core.cache import get_or_set_page, invalidate_paths
from core.exceptions import PermissionDeniedError, ResourceNotFound
from programs.models import Program

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/coach/dashboard"


def public_program_path(slug: str) -> str:
    return f"/programs/{slug}"


def get_owned_program(coach, program_id) -> Program:
    """
    Load a program and verify the coach owns it.

    Raises ResourceNotFound / PermissionDeniedError.
    """
    try:
        program = Program.objects.get(id=program_id)
    except (Program.DoesNotExist, ValueError, DjangoValidationError):
        raise ResourceNotFound("Program not found.")

    if program.coach_id != coach.id:
        logger.warning(f"Ownership check failed: coach={coach.id} program={program_id}")
        raise PermissionDeniedError()

    return program


class ProgramService:

    def get_my_programs(self, coach):
        return Program.objects.filter(coach=coach).order_by("-created_at")

    @transaction.atomic
    def create_program(self, coach, data: Dict[str, Any]) -> Program:
        program = Program(id=uuid.uuid4(), coach=coach, **data)
        program.full_clean(exclude=["slug"])
        program.save()

        invalidate_paths(DASHBOARD_PATH)
        logger.info(f"Program created: {program.id} by coach {coach.id}")
        return program

    @transaction.atomic
    def update_program(self, coach, program_id, data: Dict[str, Any]) -> Program:
        program = get_owned_program(coach, program_id)
        old_slug = program.slug

        for field, value in data.items():
            setattr(program, field, value)
        program.full_clean(exclude=["slug"])
        program.save()

        invalidate_paths(
            DASHBOARD_PATH,
            f"{DASHBOARD_PATH}/{program.id}",
            public_program_path(old_slug),
            public_program_path(program.slug),
        )
        return program

    @transaction.atomic
    def delete_program(self, coach, program_id) -> None:
        program = get_owned_program(coach, program_id)
        slug = program.slug
        program.delete()

        invalidate_paths(DASHBOARD_PATH, f"{DASHBOARD_PATH}/{program_id}", public_program_path(slug))
        logger.info(f"Program deleted: {program_id} by coach {coach.id}")

    def get_program(self, coach, program_id) -> Dict[str, Any]:
        from programs.services.blueprint_service import BlueprintService

        program = get_owned_program(coach, program_id)
        return {
            "program": program,
            "plan": BlueprintService().get_program_plan_data(program),
        }

    def get_program_by_slug(self, slug: str) -> Dict[str, Any]:
        """
        Public detail for published programs. Cached per slug.
        """
        from programs.api.serializers import ProgramPublicSerializer
        from programs.services.blueprint_service import BlueprintService

        program = (
            Program.objects
            .select_related("coach")
            .filter(slug=slug, is_public=True)
            .first()
        )
        if program is None:
            raise ResourceNotFound("Program not found.")

        def build():
            return {
                "program": ProgramPublicSerializer(program).data,
                "total_days": BlueprintService().get_total_days(program),
            }

        return get_or_set_page(public_program_path(slug), build)
