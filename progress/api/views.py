# progress/api/views.py

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from core.exceptions import ValidationFailed
from core.permissions import IsCoach
from members.services.member_service import parse_when
from programs.services.program_service import get_owned_program
from progress.services.performance import (
    calculate_growth_rate_in_period,
    extract_pr_from_logs,
    get_intensity_stats,
    get_monthly_frequency,
)
from progress.services.section_record_service import SectionRecordService
from progress.services.workout_log_service import WorkoutLogService
from .serializers import (
    WorkoutLogSerializer,
    CoachCommentSerializer,
    SectionRecordSerializer,
    SectionRecordSubmitSerializer,
    SectionRecordUpdateSerializer,
)

logger = logging.getLogger(__name__)


# ============================================================
# WORKOUT LOGS (MEMBER)
# ============================================================

class WorkoutLogListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workout Logs"], responses=WorkoutLogSerializer(many=True))
    def get(self, request):
        logs = WorkoutLogService().get_my_logs(request.user)
        return Response({"success": True, "data": WorkoutLogSerializer(logs, many=True).data})

    @extend_schema(tags=["Workout Logs"], request=WorkoutLogSerializer, responses=WorkoutLogSerializer)
    def post(self, request):
        serializer = WorkoutLogSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        log = WorkoutLogService().create(request.user, serializer.validated_data)
        return Response(
            {"success": True, "data": WorkoutLogSerializer(log).data},
            status=status.HTTP_201_CREATED,
        )


class WorkoutLogDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workout Logs"], responses=WorkoutLogSerializer)
    def get(self, request, log_id):
        log = WorkoutLogService().get_detail(request.user, log_id)
        return Response({"success": True, "data": WorkoutLogSerializer(log).data})

    @extend_schema(tags=["Workout Logs"], request=WorkoutLogSerializer, responses=WorkoutLogSerializer)
    def patch(self, request, log_id):
        serializer = WorkoutLogSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        log = WorkoutLogService().update(request.user, log_id, serializer.validated_data)
        return Response({"success": True, "data": WorkoutLogSerializer(log).data})

    @extend_schema(tags=["Workout Logs"])
    def delete(self, request, log_id):
        WorkoutLogService().delete(request.user, log_id)
        return Response({"success": True})


# ============================================================
# WORKOUT LOGS (COACH)
# ============================================================

class CoachMemberWorkoutLogsView(APIView):
    permission_classes = [IsAuthenticated, IsCoach]

    @extend_schema(tags=["Workout Logs"], responses=WorkoutLogSerializer(many=True))
    def get(self, request, member_id):
        logs = WorkoutLogService().get_member_logs_for_coach(request.user, member_id)
        return Response({"success": True, "data": WorkoutLogSerializer(logs, many=True).data})


class CoachWorkoutLogCommentView(APIView):
    permission_classes = [IsAuthenticated, IsCoach]

    @extend_schema(tags=["Workout Logs"], request=CoachCommentSerializer)
    def patch(self, request, log_id):
        serializer = CoachCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        log = WorkoutLogService().update_coach_comment(
            request.user, log_id, serializer.validated_data.get("comment")
        )
        return Response({"success": True, "data": WorkoutLogSerializer(log).data})


class CoachWorkoutLogToggleCheckView(APIView):
    permission_classes = [IsAuthenticated, IsCoach]

    @extend_schema(tags=["Workout Logs"])
    def post(self, request, log_id):
        log = WorkoutLogService().toggle_coach_check(request.user, log_id)
        return Response({"success": True, "data": WorkoutLogSerializer(log).data})


# ============================================================
# SECTION RECORDS (MEMBER)
# ============================================================

class SectionRecordListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Section Records"], responses=SectionRecordSerializer(many=True))
    def get(self, request):
        records = SectionRecordService().get_my_records(request.user)
        return Response({"success": True, "data": SectionRecordSerializer(records, many=True).data})

    @extend_schema(tags=["Section Records"], request=SectionRecordSubmitSerializer)
    def post(self, request):
        serializer = SectionRecordSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = SectionRecordService().create_or_update(
            request.user,
            serializer.validated_data["section_item_id"],
            serializer.validated_data["content"],
        )
        return Response(
            {"success": True, "data": SectionRecordSerializer(record).data},
            status=status.HTTP_201_CREATED,
        )


class SectionRecordDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Section Records"], responses=SectionRecordSerializer)
    def get(self, request, record_id):
        record = SectionRecordService().get_detail(request.user, record_id)
        return Response({"success": True, "data": SectionRecordSerializer(record).data})

    @extend_schema(tags=["Section Records"], request=SectionRecordUpdateSerializer)
    def patch(self, request, record_id):
        serializer = SectionRecordUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = SectionRecordService().update(request.user, record_id, serializer.validated_data["content"])
        return Response({"success": True, "data": SectionRecordSerializer(record).data})

    @extend_schema(tags=["Section Records"])
    def delete(self, request, record_id):
        SectionRecordService().delete(request.user, record_id)
        return Response({"success": True})


# ============================================================
# SECTION RECORDS (COACH)
# ============================================================

class CoachProgramSectionRecordsView(APIView):
    """GET ?phase=&day="""
    permission_classes = [IsAuthenticated, IsCoach]

    @extend_schema(tags=["Section Records"], responses=SectionRecordSerializer(many=True))
    def get(self, request, program_id):
        program = get_owned_program(request.user, program_id)
        try:
            phase = int(request.query_params["phase"])
            day = int(request.query_params["day"])
        except (KeyError, TypeError, ValueError):
            raise ValidationFailed("phase and day query parameters are required integers.")

        records = SectionRecordService().get_records_by_program_day(request.user, program, phase, day)
        return Response({"success": True, "data": SectionRecordSerializer(records, many=True).data})


class CoachSectionRecordCommentView(APIView):
    permission_classes = [IsAuthenticated, IsCoach]

    @extend_schema(tags=["Section Records"], request=CoachCommentSerializer)
    def patch(self, request, record_id):
        serializer = CoachCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = SectionRecordService().update_coach_comment(
            request.user, record_id, serializer.validated_data.get("comment")
        )
        return Response({"success": True, "data": SectionRecordSerializer(record).data})


class CoachSectionRecordDetailView(APIView):
    permission_classes = [IsAuthenticated, IsCoach]

    @extend_schema(tags=["Section Records"])
    def delete(self, request, record_id):
        SectionRecordService().delete_by_coach(request.user, record_id)
        return Response({"success": True})


# ============================================================
# PERFORMANCE
# ============================================================

class MyPerformanceView(APIView):
    """
    Own PRs per exercise with chart data. ?library_id= narrows to one exercise;
    ?start=&end= adds the growth rate inside that window.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Performance"])
    def get(self, request):
        params = request.query_params
        start, end = parse_when(params.get("start")), parse_when(params.get("end"))

        logs = WorkoutLogService().get_my_logs(request.user)
        progress = extract_pr_from_logs(logs, params.get("library_id"))

        data = []
        for item in progress.values():
            entry = item.to_dict()
            if start and end:
                entry["period_growth_rate"] = calculate_growth_rate_in_period(item.history, start, end)
            data.append(entry)
        return Response({"success": True, "data": data})


class MyTrainingSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Performance"])
    def get(self, request):
        try:
            months = int(request.query_params.get("months", 6))
        except (TypeError, ValueError):
            raise ValidationFailed("months must be an integer.")
        if months < 1:
            raise ValidationFailed("months must be positive.")

        logs = list(WorkoutLogService().get_my_logs(request.user))
        return Response({
            "success": True,
            "data": {
                "intensity": get_intensity_stats(logs),
                "monthly_frequency": get_monthly_frequency(logs, months),
            },
        })
