# programs/services/section_service.py

import logging
from typing import Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Max

from core.cache import invalidate_paths
from core.exceptions import PermissionDeniedError, ResourceNotFound, ValidationFailed
from programs.models import BlueprintSection, BlueprintSectionItem, ProgramBlueprint

logger = logging.getLogger(__name__)


def _invalidate(blueprint: ProgramBlueprint):
    invalidate_paths(f"/coach/dashboard/{blueprint.program_id}/plan")


class SectionService:
    """Sections are attached to blueprint days through ordered items."""

    def get_blueprint_sections(self, blueprint: ProgramBlueprint):
        return (
            BlueprintSectionItem.objects
            .filter(blueprint=blueprint)
            .select_related("section")
            .order_by("order_index")
        )

    def _next_order_index(self, blueprint: ProgramBlueprint) -> int:
        last = blueprint.section_items.aggregate(m=Max("order_index"))["m"]
        return 0 if last is None else last + 1

    @transaction.atomic
    def create_section(self, blueprint: ProgramBlueprint, title: str, content: Optional[str] = None,
                       record_type: str = BlueprintSection.RecordType.OTHER,
                       is_recordable: bool = False,
                       order_index: Optional[int] = None) -> BlueprintSectionItem:
        section = BlueprintSection.objects.create(
            title=title,
            content=content,
            record_type=record_type,
            is_recordable=is_recordable,
        )
        item = BlueprintSectionItem.objects.create(
            blueprint=blueprint,
            section=section,
            order_index=self._next_order_index(blueprint) if order_index is None else order_index,
        )
        _invalidate(blueprint)
        return item

    def get_owned_section(self, coach, section_id) -> BlueprintSection:
        """A section belongs to a coach through any blueprint of their programs."""
        try:
            section = BlueprintSection.objects.get(id=section_id)
        except (BlueprintSection.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Section not found.")

        owned = section.items.filter(blueprint__program__coach=coach).exists()
        if not owned:
            raise PermissionDeniedError()
        return section

    def update_section(self, coach, section_id, **fields) -> BlueprintSection:
        section = self.get_owned_section(coach, section_id)
        allowed = {"title", "content", "record_type", "is_recordable"}
        for name, value in fields.items():
            if name in allowed:
                setattr(section, name, value)
        section.save()

        for item in section.items.select_related("blueprint"):
            _invalidate(item.blueprint)
        return section

    @transaction.atomic
    def delete_section(self, coach, section_id) -> None:
        section = self.get_owned_section(coach, section_id)
        blueprints = [item.blueprint for item in section.items.select_related("blueprint")]
        # Items cascade with the section
        section.delete()
        for blueprint in blueprints:
            _invalidate(blueprint)

    def remove_section_from_blueprint(self, blueprint: ProgramBlueprint, item_id) -> None:
        deleted, _ = BlueprintSectionItem.objects.filter(id=item_id, blueprint=blueprint).delete()
        if not deleted:
            raise ResourceNotFound("Section is not attached to this day.")
        _invalidate(blueprint)

    @transaction.atomic
    def reorder_sections(self, blueprint: ProgramBlueprint, orders: List[Dict]) -> None:
        """orders: [{"item_id": ..., "order_index": ...}], applied all-or-nothing."""
        items = {
            str(item.id): item
            for item in BlueprintSectionItem.objects.select_for_update().filter(blueprint=blueprint)
        }

        for entry in orders:
            item = items.get(str(entry["item_id"]))
            if item is None:
                raise ValidationFailed(f"Section item {entry['item_id']} does not belong to this day.")
            item.order_index = entry["order_index"]
            item.save(update_fields=["order_index"])

        _invalidate(blueprint)
