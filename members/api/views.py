# members/api/views.py

"""
MEMBER MANAGEMENT API

Coach-only. Program-scoped views resolve the program through
get_owned_program() before touching member data.
"""

import logging

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from core.exceptions import ValidationFailed
from core.permissions import IsCoach
from members.services.dashboard_service import DashboardService
from members.services.member_service import MemberService
from programs.services.program_service import get_owned_program
from .serializers import (
    EnrollmentStatusSerializer,
    EnrollmentExtendSerializer,
    EnrollmentDatesSerializer,
    ManagedEnrollmentSerializer,
)

logger = logging.getLogger(__name__)

COACH_PERMISSIONS = [IsAuthenticated, IsCoach]


def _positive_int(value, default, name):
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"{name} must be an integer.")
    if number < 1:
        raise ValidationFailed(f"{name} must be positive.")
    return number


class ProgramScopedView(APIView):
    permission_classes = COACH_PERMISSIONS

    def get_program(self, request, program_id):
        return get_owned_program(request.user, program_id)


# ============================================================
# PROGRAM-SCOPED
# ============================================================

class MemberListView(ProgramScopedView):
    """GET ?q= searches by name or email."""

    @extend_schema(tags=["Members"])
    def get(self, request, program_id):
        program = self.get_program(request, program_id)
        term = request.query_params.get("q")
        service = MemberService()
        data = service.search_members(program, term) if term else service.get_members(program)
        return Response({"success": True, "data": data})


class MemberStatsView(ProgramScopedView):

    @extend_schema(tags=["Members"])
    def get(self, request, program_id):
        program = self.get_program(request, program_id)
        return Response({"success": True, "data": MemberService().get_member_stats(program)})


class ExpiringMembersView(ProgramScopedView):

    @extend_schema(tags=["Members"])
    def get(self, request, program_id):
        program = self.get_program(request, program_id)
        days = _positive_int(
            request.query_params.get("days"),
            settings.MEMBER_CONFIG["EXPIRING_WITHIN_DAYS"],
            "days",
        )
        return Response({"success": True, "data": MemberService().get_expiring_members(program, days)})


class DashboardStatsView(ProgramScopedView):

    @extend_schema(tags=["Dashboard"])
    def get(self, request, program_id):
        program = self.get_program(request, program_id)
        return Response({"success": True, "data": DashboardService().get_dashboard_stats(program)})


class RecentPurchasesView(ProgramScopedView):

    @extend_schema(tags=["Dashboard"])
    def get(self, request, program_id):
        program = self.get_program(request, program_id)
        limit = _positive_int(
            request.query_params.get("limit"),
            settings.MEMBER_CONFIG["RECENT_PURCHASES_LIMIT"],
            "limit",
        )
        return Response({"success": True, "data": DashboardService().get_recent_purchases(program, limit)})


class HomeworkPageView(ProgramScopedView):

    @extend_schema(tags=["Homework"])
    def get(self, request, program_id):
        program = self.get_program(request, program_id)
        return Response({"success": True, "data": DashboardService().get_homework_page_data(program)})


class HomeworkSubmissionsView(ProgramScopedView):

    @extend_schema(tags=["Homework"])
    def get(self, request, program_id, phase_number, day_number):
        program = self.get_program(request, program_id)
        data = DashboardService().get_homework_submissions(program, phase_number, day_number)
        return Response({"success": True, "data": data})


class MemberDetailView(ProgramScopedView):

    @extend_schema(tags=["Members"])
    def get(self, request, program_id, member_id):
        program = self.get_program(request, program_id)
        return Response({"success": True, "data": MemberService().get_member_detail(program, member_id)})


class MemberWorkoutLogsView(ProgramScopedView):

    @extend_schema(tags=["Members"])
    def get(self, request, program_id, member_id):
        program = self.get_program(request, program_id)
        return Response({"success": True, "data": MemberService().get_member_workout_logs(program, member_id)})


class MemberCommentsView(ProgramScopedView):

    @extend_schema(tags=["Members"])
    def get(self, request, program_id, member_id):
        program = self.get_program(request, program_id)
        return Response({"success": True, "data": MemberService().get_member_coach_comments(program, member_id)})


class MemberCurrentPRsView(ProgramScopedView):

    @extend_schema(tags=["Members"])
    def get(self, request, program_id, member_id):
        program = self.get_program(request, program_id)
        return Response({"success": True, "data": MemberService().get_member_current_prs(program, member_id)})


class MemberPRHistoryView(ProgramScopedView):

    @extend_schema(tags=["Members"])
    def get(self, request, program_id, member_id):
        program = self.get_program(request, program_id)
        data = MemberService().get_member_pr_history(
            program, member_id, request.query_params.get("library_id") or None
        )
        return Response({"success": True, "data": data})


# ============================================================
# COACH-WIDE
# ============================================================

class MemberOrdersView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Members"])
    def get(self, request, member_id):
        return Response({"success": True, "data": MemberService().get_member_orders(request.user, member_id)})


class EnrollmentStatusView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Members"], request=EnrollmentStatusSerializer)
    def patch(self, request, enrollment_id):
        serializer = EnrollmentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        enrollment = MemberService().update_enrollment_status(
            request.user, enrollment_id, serializer.validated_data["status"]
        )
        return Response({"success": True, "data": ManagedEnrollmentSerializer(enrollment).data})


class EnrollmentExtendView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Members"], request=EnrollmentExtendSerializer)
    def post(self, request, enrollment_id):
        serializer = EnrollmentExtendSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        enrollment = MemberService().extend_enrollment(
            request.user, enrollment_id, serializer.validated_data.get("end_date")
        )
        return Response({
            "success": True,
            "message": "Enrollment extended.",
            "data": ManagedEnrollmentSerializer(enrollment).data,
        })


class EnrollmentDatesView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Members"], request=EnrollmentDatesSerializer)
    def patch(self, request, enrollment_id):
        serializer = EnrollmentDatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        service = MemberService()
        enrollment = None
        if "start_date" in data:
            enrollment = service.update_enrollment_start_date(request.user, enrollment_id, data["start_date"])
        if "end_date" in data:
            enrollment = service.update_enrollment_end_date(request.user, enrollment_id, data["end_date"])

        return Response({"success": True, "data": ManagedEnrollmentSerializer(enrollment).data})
