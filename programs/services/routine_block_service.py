# programs/services/routine_block_service.py

"""
ROUTINE BLOCK SERVICE

Coach-owned reusable exercise sets. Item recommendations are shaped
by the library exercise's workout type.
"""

import logging
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Max, Prefetch

from core.exceptions import PermissionDeniedError, ResourceNotFound, ValidationFailed
from core.pagination import paginate_queryset
from programs.models import RoutineBlock, RoutineItem, WorkoutLibrary

logger = logging.getLogger(__name__)

WorkoutType = WorkoutLibrary.WorkoutType

RECOMMENDATION_TEMPLATES = {
    WorkoutType.WEIGHT_REPS: ("sets", "reps", "weight", "rest", "note"),
    WorkoutType.DURATION: ("duration", "rounds", "rest", "note"),
    WorkoutType.TIME: ("duration", "rounds", "rest", "note"),
    WorkoutType.DISTANCE: ("distance", "time", "rest", "note"),
}


def recommendation_template(workout_type: str) -> Dict[str, Any]:
    keys = RECOMMENDATION_TEMPLATES.get(workout_type, RECOMMENDATION_TEMPLATES[WorkoutType.WEIGHT_REPS])
    return {key: None for key in keys}


def validate_recommendation(workout_type: str, recommendation: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if recommendation is None:
        return {}
    if not isinstance(recommendation, dict):
        raise ValidationFailed("recommendation must be an object.")

    allowed = RECOMMENDATION_TEMPLATES.get(workout_type, ())
    unknown = set(recommendation) - set(allowed)
    if unknown:
        raise ValidationFailed(
            f"Unsupported recommendation keys for {workout_type}: {', '.join(sorted(unknown))}"
        )
    return recommendation


def serialize_item(item: RoutineItem) -> Dict[str, Any]:
    return {
        "id": str(item.id),
        "order_index": item.order_index,
        "recommendation": item.recommendation,
        "library": {
            "id": str(item.library_id),
            "title": item.library.title,
            "category": item.library.category,
            "workout_type": item.library.workout_type,
            "video_url": item.library.video_url,
        },
    }


def serialize_block(block: RoutineBlock) -> Dict[str, Any]:
    items = list(block.items.all())
    return {
        "id": str(block.id),
        "name": block.name,
        "workout_format": block.workout_format,
        "target_value": block.target_value,
        "is_leaderboard_enabled": block.is_leaderboard_enabled,
        "description": block.description,
        "item_count": len(items),
        "items": [serialize_item(i) for i in items],
        "created_at": block.created_at,
        "updated_at": block.updated_at,
    }


class RoutineBlockService:

    def _queryset(self, coach):
        return (
            RoutineBlock.objects
            .filter(coach=coach)
            .prefetch_related(
                Prefetch("items", queryset=RoutineItem.objects.select_related("library").order_by("order_index"))
            )
        )

    def list(self, coach, page: int = 1, page_size: int = 20, search: Optional[str] = None,
             workout_format: Optional[str] = None) -> Dict[str, Any]:
        qs = self._queryset(coach)
        if search:
            qs = qs.filter(name__icontains=search)
        if workout_format:
            qs = qs.filter(workout_format=workout_format)
        qs = qs.order_by("-created_at")

        return paginate_queryset(qs, page, page_size, serialize=serialize_block)

    def get(self, coach, block_id) -> RoutineBlock:
        try:
            block = RoutineBlock.objects.get(id=block_id)
        except (RoutineBlock.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Routine block not found.")
        if block.coach_id != coach.id:
            raise PermissionDeniedError()
        return self._queryset(coach).get(id=block.id)

    def create(self, coach, **fields) -> RoutineBlock:
        block = RoutineBlock.objects.create(coach=coach, **fields)
        logger.info(f"Routine block created: {block.id} by coach {coach.id}")
        return block

    def update(self, coach, block_id, **fields) -> RoutineBlock:
        block = self.get(coach, block_id)
        allowed = {"name", "workout_format", "target_value", "is_leaderboard_enabled", "description"}
        for name, value in fields.items():
            if name in allowed:
                setattr(block, name, value)
        block.save()
        return block

    def delete(self, coach, block_id) -> None:
        self.get(coach, block_id).delete()

    # --------------------------------------------------------
    # Items
    # --------------------------------------------------------

    def _get_item(self, coach, item_id) -> RoutineItem:
        try:
            item = RoutineItem.objects.select_related("block", "library").get(id=item_id)
        except (RoutineItem.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Routine item not found.")
        if item.block.coach_id != coach.id:
            raise PermissionDeniedError()
        return item

    @transaction.atomic
    def add_item(self, coach, block_id, library_id, recommendation: Optional[Dict[str, Any]] = None) -> RoutineItem:
        block = self.get(coach, block_id)
        try:
            library = WorkoutLibrary.objects.get(id=library_id)
        except (WorkoutLibrary.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Workout not found.")

        recommendation = validate_recommendation(library.workout_type, recommendation)

        # Lock the block so concurrent appends serialize on order_index
        RoutineBlock.objects.select_for_update().filter(id=block.id).first()
        last = RoutineItem.objects.filter(block=block).aggregate(m=Max("order_index"))["m"]

        return RoutineItem.objects.create(
            block=block,
            library=library,
            order_index=0 if last is None else last + 1,
            recommendation=recommendation,
        )

    @transaction.atomic
    def update_item_order(self, coach, block_id, orders: List[Dict[str, Any]]) -> None:
        block = self.get(coach, block_id)
        items = {
            str(item.id): item
            for item in RoutineItem.objects.select_for_update().filter(block=block)
        }
        for entry in orders:
            item = items.get(str(entry["id"]))
            if item is None:
                raise ValidationFailed(f"Item {entry['id']} does not belong to this block.")
            item.order_index = entry["order_index"]
            item.save(update_fields=["order_index"])

    def update_item(self, coach, item_id, recommendation: Dict[str, Any]) -> RoutineItem:
        item = self._get_item(coach, item_id)
        item.recommendation = validate_recommendation(item.library.workout_type, recommendation)
        item.save(update_fields=["recommendation"])
        return item

    def delete_item(self, coach, item_id) -> None:
        self._get_item(coach, item_id).delete()

