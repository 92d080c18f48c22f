# programs/services/workout_library_service.py

from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q

from core.exceptions import ResourceNotFound
from core.pagination import paginate_queryset
from programs.models import WorkoutLibrary


def serialize_library_item(item: WorkoutLibrary) -> Dict[str, Any]:
    return {
        "id": str(item.id),
        "coach_id": str(item.coach_id) if item.coach_id else None,
        "coach_name": item.coach.full_name if item.coach_id else None,
        "title": item.title,
        "category": item.category,
        "workout_type": item.workout_type,
        "video_url": item.video_url,
        "description": item.description,
        "is_system": item.is_system,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }


class WorkoutLibraryService:

    def list(self, page: int = 1, page_size: int = 20, search: Optional[str] = None,
             category: Optional[str] = None, workout_type: Optional[str] = None) -> Dict[str, Any]:
        qs = WorkoutLibrary.objects.select_related("coach")

        if search:
            qs = qs.filter(
                Q(title__icontains=search) |
                Q(category__icontains=search) |
                Q(description__icontains=search)
            )
        if category:
            qs = qs.filter(category=category)
        if workout_type:
            qs = qs.filter(workout_type=workout_type)

        qs = qs.order_by("-created_at", "-updated_at")
        return paginate_queryset(qs, page, page_size, serialize=serialize_library_item)

    def get(self, library_id) -> WorkoutLibrary:
        try:
            return WorkoutLibrary.objects.select_related("coach").get(id=library_id)
        except (WorkoutLibrary.DoesNotExist, ValueError, DjangoValidationError):
            raise ResourceNotFound("Workout not found.")

    def filters(self) -> Dict[str, Any]:
        categories = (
            WorkoutLibrary.objects
            .exclude(category__isnull=True)
            .exclude(category="")
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )
        workout_types = (
            WorkoutLibrary.objects
            .order_by("workout_type")
            .values_list("workout_type", flat=True)
            .distinct()
        )
        return {
            "categories": list(categories),
            "workout_types": list(workout_types),
        }

    def create_custom(self, coach, **fields) -> WorkoutLibrary:
        return WorkoutLibrary.objects.create(coach=coach, is_system=False, **fields)
