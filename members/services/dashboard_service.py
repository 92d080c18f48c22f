# members/services/dashboard_service.py

"""
DASHBOARD SERVICE

Per-program sales and engagement numbers, recent purchases and the
homework (submitted workout logs) views for the coach dashboard.
"""

import logging
from typing import Any, Dict, List

from django.db.models import Count, F, Q, Sum

from billing.models import Enrollment, Order
from core.exceptions import ResourceNotFound
from programs.models import BlueprintSectionItem, ProgramBlueprint, RoutineBlock
from progress.models import SectionRecord, WorkoutLog

logger = logging.getLogger(__name__)


class DashboardService:

    def get_dashboard_stats(self, program) -> Dict[str, Any]:
        orders = Order.objects.filter(program=program)
        revenue = orders.filter(status=Order.Status.COMPLETED).aggregate(total=Sum("amount"))["total"]

        enrollments = Enrollment.objects.filter(program=program)
        enrollment_count = enrollments.count()
        active_users = enrollments.filter(status=Enrollment.Status.ACTIVE).count()

        recordable_sections = BlueprintSectionItem.objects.filter(
            blueprint__program=program,
            section__is_recordable=True,
        ).count()
        records = SectionRecord.objects.filter(section_item__blueprint__program=program).count()

        expected = recordable_sections * enrollment_count
        completion_rate = round(records / expected * 100, 1) if expected else 0

        return {
            "total_sales": orders.count(),
            "total_revenue": revenue or 0,
            "active_users": active_users,
            "completion_rate": completion_rate,
        }

    def get_recent_purchases(self, program, limit: int = 10) -> List[Dict[str, Any]]:
        orders = (
            Order.objects
            .filter(program=program)
            .select_related("buyer")
            .order_by("-created_at")[:limit]
        )
        return [
            {
                "id": str(order.id),
                "user_name": order.buyer.full_name or order.buyer.email or "Unknown",
                "date": order.created_at,
                "amount": order.amount,
            }
            for order in orders
        ]

    # --------------------------------------------------------
    # Homework
    # --------------------------------------------------------

    def get_homework_page_data(self, program) -> Dict[str, Any]:
        logs = WorkoutLog.objects.filter(blueprint__program=program)
        stats = logs.aggregate(
            total_submissions=Count("id"),
            completed_reviews=Count("id", filter=Q(is_checked_by_coach=True)),
        )
        stats["pending_reviews"] = stats["total_submissions"] - stats["completed_reviews"]

        days = (
            ProgramBlueprint.objects
            .filter(program=program)
            .order_by("phase_number", "day_number")
            .values_list("phase_number", "day_number")
        )

        return {
            "program": {
                "id": str(program.id),
                "title": program.title,
                "total_weeks": program.duration_weeks,
            },
            "stats": {
                "total_submissions": stats["total_submissions"],
                "pending_reviews": stats["pending_reviews"],
                "completed_reviews": stats["completed_reviews"],
            },
            "available_days": [
                {"phase_number": phase, "day_number": day, "label": f"P{phase}-D{day}"}
                for phase, day in days
            ],
        }

    def _is_time_ranked(self, blueprint) -> bool:
        """A leaderboard-enabled FOR_TIME block on the day ranks by time."""
        return blueprint.routine_links.filter(
            routine_block__workout_format=RoutineBlock.WorkoutFormat.FOR_TIME,
            routine_block__is_leaderboard_enabled=True,
        ).exists()

    def get_homework_submissions(self, program, phase_number: int, day_number: int) -> Dict[str, Any]:
        blueprint = ProgramBlueprint.objects.filter(
            program=program,
            phase_number=phase_number,
            day_number=day_number,
        ).first()
        if blueprint is None:
            raise ResourceNotFound(f"Day P{phase_number}-D{day_number} not found.")

        time_ranked = self._is_time_ranked(blueprint)
        logs = WorkoutLog.objects.filter(blueprint=blueprint).select_related("user", "library")
        if time_ranked:
            logs = logs.order_by(F("total_duration").asc(nulls_last=True), "created_at")
        else:
            logs = logs.order_by(
                F("total_volume").desc(nulls_last=True),
                F("max_weight").desc(nulls_last=True),
                "created_at",
            )

        return {
            "label": blueprint.label,
            "ranking": "total_duration" if time_ranked else "total_volume",
            "submissions": [
                {
                    "rank": rank,
                    "id": str(log.id),
                    "user": {
                        "id": str(log.user_id),
                        "full_name": log.user.full_name,
                        "email": log.user.email,
                        "avatar_url": log.user.avatar_url,
                    },
                    "library_title": log.library.title,
                    "log_date": log.log_date,
                    "content": log.content,
                    "intensity": log.intensity,
                    "max_weight": log.max_weight,
                    "total_volume": log.total_volume,
                    "total_duration": log.total_duration,
                    "coach_comment": log.coach_comment,
                    "is_checked_by_coach": log.is_checked_by_coach,
                }
                for rank, log in enumerate(logs, start=1)
            ],
        }
