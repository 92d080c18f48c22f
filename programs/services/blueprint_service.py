# programs/services/blueprint_service.py

"""
BLUEPRINT SERVICE

Curriculum plan: blueprints are addressed by (phase_number, day_number)
within a program. Plan data is grouped by phase, days ascending,
sections and routine blocks by order_index.
"""

import logging
from itertools import groupby
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Max, Prefetch

from core.cache import invalidate_paths
from core.exceptions import ConflictError, ResourceNotFound, ValidationFailed
from programs.models import (
    Program,
    ProgramBlueprint,
    BlueprintSectionItem,
    BlueprintRoutineBlock,
    RoutineBlock,
)
from programs.services.program_service import public_program_path

logger = logging.getLogger(__name__)


def _plan_path(program: Program) -> str:
    return f"/coach/dashboard/{program.id}/plan"


def _invalidate(program: Program) -> None:
    # The public page carries total_days.
    invalidate_paths(_plan_path(program), public_program_path(program.slug))


class BlueprintService:

    # --------------------------------------------------------
    # Reads
    # --------------------------------------------------------

    def _blueprints(self, program: Program):
        return (
            ProgramBlueprint.objects
            .filter(program=program)
            .order_by("phase_number", "day_number")
            .prefetch_related(
                Prefetch(
                    "section_items",
                    queryset=BlueprintSectionItem.objects.select_related("section").order_by("order_index"),
                ),
                Prefetch(
                    "routine_links",
                    queryset=BlueprintRoutineBlock.objects.select_related("routine_block").order_by("order_index"),
                ),
            )
        )

    @staticmethod
    def serialize_day(blueprint: ProgramBlueprint) -> Dict[str, Any]:
        return {
            "id": str(blueprint.id),
            "phase_number": blueprint.phase_number,
            "day_number": blueprint.day_number,
            "day_title": blueprint.day_title,
            "notes": blueprint.notes,
            "sections": [
                {
                    "item_id": str(item.id),
                    "section_id": str(item.section_id),
                    "order_index": item.order_index,
                    "title": item.section.title,
                    "content": item.section.content,
                    "record_type": item.section.record_type,
                    "is_recordable": item.section.is_recordable,
                }
                for item in blueprint.section_items.all()
            ],
            "routine_blocks": [
                {
                    "link_id": str(link.id),
                    "routine_block_id": str(link.routine_block_id),
                    "order_index": link.order_index,
                    "name": link.routine_block.name,
                    "workout_format": link.routine_block.workout_format,
                    "is_leaderboard_enabled": link.routine_block.is_leaderboard_enabled,
                }
                for link in blueprint.routine_links.all()
            ],
        }

    def get_program_plan_data(self, program: Program) -> Dict[str, Any]:
        blueprints = list(self._blueprints(program))

        phases = []
        for phase_number, days in groupby(blueprints, key=lambda bp: bp.phase_number):
            phases.append({
                "phase_number": phase_number,
                "days": [self.serialize_day(bp) for bp in days],
            })

        return {
            "program_id": str(program.id),
            "phases": phases,
            "total_days": len(blueprints),
        }

    def get_blueprint(self, program: Program, blueprint_id) -> ProgramBlueprint:
        try:
            return ProgramBlueprint.objects.get(id=blueprint_id, program=program)
        except (ProgramBlueprint.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Blueprint not found.")

    def get_blueprint_by_phase_and_day(self, program: Program, phase_number: int,
                                       day_number: int) -> Dict[str, Any]:
        blueprint = self._blueprints(program).filter(
            phase_number=phase_number,
            day_number=day_number,
        ).first()
        if blueprint is None:
            raise ResourceNotFound("Blueprint not found.")
        return self.serialize_day(blueprint)

    def get_total_days(self, program: Program) -> int:
        return ProgramBlueprint.objects.filter(program=program).count()

    # --------------------------------------------------------
    # Writes
    # --------------------------------------------------------

    def create_blueprint(self, program: Program, phase_number: int, day_number: int,
                         day_title: Optional[str] = None, notes: Optional[str] = None) -> ProgramBlueprint:
        if phase_number < 1 or day_number < 1:
            raise ValidationFailed("Phase and day numbers start at 1.")

        try:
            with transaction.atomic():
                blueprint = ProgramBlueprint.objects.create(
                    program=program,
                    phase_number=phase_number,
                    day_number=day_number,
                    day_title=day_title,
                    notes=notes,
                )
        except IntegrityError:
            raise ConflictError(f"Day P{phase_number}-D{day_number} already exists.")

        _invalidate(program)
        return blueprint

    def update_blueprint(self, program: Program, blueprint_id, **fields) -> ProgramBlueprint:
        blueprint = self.get_blueprint(program, blueprint_id)
        allowed = {"day_title", "notes"}
        for name, value in fields.items():
            if name in allowed:
                setattr(blueprint, name, value)
        blueprint.save()

        _invalidate(program)
        return blueprint

    def delete_blueprint(self, program: Program, blueprint_id) -> None:
        blueprint = self.get_blueprint(program, blueprint_id)
        blueprint.delete()
        _invalidate(program)

    @transaction.atomic
    def create_phase(self, program: Program, phase_number: int, day_count: int) -> List[ProgramBlueprint]:
        """Bulk-create days 1..day_count for a new phase."""
        if phase_number < 1 or day_count < 1:
            raise ValidationFailed("Phase number and day count must be positive.")

        if ProgramBlueprint.objects.filter(program=program, phase_number=phase_number).exists():
            raise ConflictError(f"Phase {phase_number} already exists.")

        blueprints = ProgramBlueprint.objects.bulk_create([
            ProgramBlueprint(program=program, phase_number=phase_number, day_number=day)
            for day in range(1, day_count + 1)
        ])

        _invalidate(program)
        logger.info(f"Phase {phase_number} created with {day_count} days for program {program.id}")
        return blueprints

    @transaction.atomic
    def delete_phase(self, program: Program, phase_number: int) -> int:
        deleted, _ = ProgramBlueprint.objects.filter(
            program=program,
            phase_number=phase_number,
        ).delete()
        _invalidate(program)
        return deleted

    @transaction.atomic
    def add_day_to_phase(self, program: Program, phase_number: int,
                         day_title: Optional[str] = None) -> ProgramBlueprint:
        # Lock the phase rows so concurrent appends cannot pick the same day
        days = list(
            ProgramBlueprint.objects
            .select_for_update()
            .filter(program=program, phase_number=phase_number)
            .values_list("day_number", flat=True)
        )
        if not days:
            raise ResourceNotFound(f"Phase {phase_number} not found.")

        blueprint = ProgramBlueprint.objects.create(
            program=program,
            phase_number=phase_number,
            day_number=max(days) + 1,
            day_title=day_title,
        )
        _invalidate(program)
        return blueprint

    # --------------------------------------------------------
    # Routine blocks on a day
    # --------------------------------------------------------

    @transaction.atomic
    def attach_routine_block(self, program: Program, blueprint_id, routine_block_id) -> BlueprintRoutineBlock:
        blueprint = self.get_blueprint(program, blueprint_id)
        try:
            block = RoutineBlock.objects.get(id=routine_block_id, coach_id=program.coach_id)
        except (RoutineBlock.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Routine block not found.")

        last = blueprint.routine_links.aggregate(m=Max("order_index"))["m"]
        link = BlueprintRoutineBlock.objects.create(
            blueprint=blueprint,
            routine_block=block,
            order_index=0 if last is None else last + 1,
        )
        _invalidate(program)
        return link

    def detach_routine_block(self, program: Program, blueprint_id, link_id) -> None:
        blueprint = self.get_blueprint(program, blueprint_id)
        deleted, _ = BlueprintRoutineBlock.objects.filter(id=link_id, blueprint=blueprint).delete()
        if not deleted:
            raise ResourceNotFound("Routine block is not attached to this day.")
        _invalidate(program)
