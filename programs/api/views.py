# programs/api/views.py

"""
PROGRAM API VIEWS

Coach authoring endpoints (ownership enforced in the service layer)
and the public slug lookup.
"""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny

from core.exceptions import ValidationFailed
from core.pagination import parse_page_params
from core.permissions import IsCoach
from programs.services.program_service import ProgramService, get_owned_program
from programs.services.blueprint_service import BlueprintService
from programs.services.section_service import SectionService
from programs.services.workout_library_service import WorkoutLibraryService, serialize_library_item
from programs.services.routine_block_service import (
    RoutineBlockService,
    recommendation_template,
    serialize_block,
    serialize_item,
)
from .serializers import (
    ProgramSerializer,
    BlueprintCreateSerializer,
    BlueprintUpdateSerializer,
    PhaseCreateSerializer,
    SectionSerializer,
    OrderEntrySerializer,
    RoutineLinkSerializer,
    WorkoutLibrarySerializer,
    RoutineBlockSerializer,
    RoutineItemCreateSerializer,
    RoutineItemUpdateSerializer,
    RoutineItemOrderSerializer,
)

logger = logging.getLogger(__name__)

COACH_PERMISSIONS = [IsAuthenticated, IsCoach]


def _int_param(value, name):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"{name} must be an integer.")


# ============================================================
# PROGRAMS
# ============================================================

class MyProgramsView(APIView):
    """List / create the signed-in coach's programs."""
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Programs"], responses=ProgramSerializer(many=True))
    def get(self, request):
        programs = ProgramService().get_my_programs(request.user)
        return Response({"success": True, "data": ProgramSerializer(programs, many=True).data})

    @extend_schema(tags=["Programs"], request=ProgramSerializer, responses=ProgramSerializer)
    def post(self, request):
        serializer = ProgramSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        program = ProgramService().create_program(request.user, serializer.validated_data)
        return Response(
            {"success": True, "data": ProgramSerializer(program).data},
            status=status.HTTP_201_CREATED,
        )


class ProgramDetailView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Programs"])
    def get(self, request, program_id):
        result = ProgramService().get_program(request.user, program_id)
        return Response({
            "success": True,
            "data": {
                **ProgramSerializer(result["program"]).data,
                "plan": result["plan"],
            },
        })

    @extend_schema(tags=["Programs"], request=ProgramSerializer, responses=ProgramSerializer)
    def patch(self, request, program_id):
        program = get_owned_program(request.user, program_id)
        serializer = ProgramSerializer(program, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        program = ProgramService().update_program(request.user, program_id, serializer.validated_data)
        return Response({"success": True, "data": ProgramSerializer(program).data})

    @extend_schema(tags=["Programs"])
    def delete(self, request, program_id):
        ProgramService().delete_program(request.user, program_id)
        return Response({"success": True})


class PublicProgramView(APIView):
    """Public program page data by slug."""
    permission_classes = [AllowAny]

    @extend_schema(tags=["Programs"])
    def get(self, request, slug):
        return Response({"success": True, "data": ProgramService().get_program_by_slug(slug)})


# ============================================================
# CURRICULUM PLAN
# ============================================================

class ProgramPlanView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"])
    def get(self, request, program_id):
        program = get_owned_program(request.user, program_id)
        return Response({"success": True, "data": BlueprintService().get_program_plan_data(program)})


class BlueprintListView(APIView):
    """
    GET  ?phase=&day=  -> single day
    POST               -> create a day
    """
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"])
    def get(self, request, program_id):
        program = get_owned_program(request.user, program_id)
        phase = request.query_params.get("phase")
        day = request.query_params.get("day")
        if phase is None or day is None:
            raise ValidationFailed("phase and day query parameters are required.")

        data = BlueprintService().get_blueprint_by_phase_and_day(
            program, _int_param(phase, "phase"), _int_param(day, "day")
        )
        return Response({"success": True, "data": data})

    @extend_schema(tags=["Curriculum"], request=BlueprintCreateSerializer)
    def post(self, request, program_id):
        program = get_owned_program(request.user, program_id)
        serializer = BlueprintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        blueprint = BlueprintService().create_blueprint(program, **serializer.validated_data)
        return Response(
            {"success": True, "data": {"id": str(blueprint.id), "label": blueprint.label}},
            status=status.HTTP_201_CREATED,
        )


class BlueprintDetailView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"], request=BlueprintUpdateSerializer)
    def patch(self, request, program_id, blueprint_id):
        program = get_owned_program(request.user, program_id)
        serializer = BlueprintUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        blueprint = BlueprintService().update_blueprint(program, blueprint_id, **serializer.validated_data)
        return Response({
            "success": True,
            "data": {"id": str(blueprint.id), "day_title": blueprint.day_title, "notes": blueprint.notes},
        })

    @extend_schema(tags=["Curriculum"])
    def delete(self, request, program_id, blueprint_id):
        program = get_owned_program(request.user, program_id)
        BlueprintService().delete_blueprint(program, blueprint_id)
        return Response({"success": True})


class PhaseView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"], request=PhaseCreateSerializer)
    def post(self, request, program_id):
        program = get_owned_program(request.user, program_id)
        serializer = PhaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        days = BlueprintService().create_phase(program, **serializer.validated_data)
        return Response(
            {"success": True, "data": {"created": len(days)}},
            status=status.HTTP_201_CREATED,
        )


class PhaseDetailView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"])
    def delete(self, request, program_id, phase_number):
        program = get_owned_program(request.user, program_id)
        deleted = BlueprintService().delete_phase(program, phase_number)
        return Response({"success": True, "data": {"deleted": deleted}})


class PhaseDayView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"])
    def post(self, request, program_id, phase_number):
        program = get_owned_program(request.user, program_id)
        blueprint = BlueprintService().add_day_to_phase(
            program, phase_number, day_title=request.data.get("day_title")
        )
        return Response(
            {"success": True, "data": {"id": str(blueprint.id), "day_number": blueprint.day_number}},
            status=status.HTTP_201_CREATED,
        )


# ============================================================
# SECTIONS
# ============================================================

class BlueprintSectionsView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Sections"])
    def get(self, request, program_id, blueprint_id):
        program = get_owned_program(request.user, program_id)
        blueprint = BlueprintService().get_blueprint(program, blueprint_id)
        items = SectionService().get_blueprint_sections(blueprint)
        return Response({
            "success": True,
            "data": [
                {"item_id": str(item.id), "order_index": item.order_index, **SectionSerializer(item.section).data}
                for item in items
            ],
        })

    @extend_schema(tags=["Sections"], request=SectionSerializer)
    def post(self, request, program_id, blueprint_id):
        program = get_owned_program(request.user, program_id)
        blueprint = BlueprintService().get_blueprint(program, blueprint_id)
        serializer = SectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = SectionService().create_section(blueprint, **serializer.validated_data)
        return Response(
            {
                "success": True,
                "data": {"item_id": str(item.id), "order_index": item.order_index,
                         **SectionSerializer(item.section).data},
            },
            status=status.HTTP_201_CREATED,
        )


class SectionReorderView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Sections"], request=OrderEntrySerializer(many=True))
    def post(self, request, program_id, blueprint_id):
        program = get_owned_program(request.user, program_id)
        blueprint = BlueprintService().get_blueprint(program, blueprint_id)
        serializer = OrderEntrySerializer(data=request.data.get("orders", []), many=True)
        serializer.is_valid(raise_exception=True)

        SectionService().reorder_sections(blueprint, serializer.validated_data)
        return Response({"success": True})


class BlueprintSectionItemView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Sections"])
    def delete(self, request, program_id, blueprint_id, item_id):
        program = get_owned_program(request.user, program_id)
        blueprint = BlueprintService().get_blueprint(program, blueprint_id)
        SectionService().remove_section_from_blueprint(blueprint, item_id)
        return Response({"success": True})


class SectionDetailView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Sections"], request=SectionSerializer)
    def patch(self, request, section_id):
        serializer = SectionSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        section = SectionService().update_section(request.user, section_id, **serializer.validated_data)
        return Response({"success": True, "data": SectionSerializer(section).data})

    @extend_schema(tags=["Sections"])
    def delete(self, request, section_id):
        SectionService().delete_section(request.user, section_id)
        return Response({"success": True})


class BlueprintRoutineBlocksView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"], request=RoutineLinkSerializer)
    def post(self, request, program_id, blueprint_id):
        program = get_owned_program(request.user, program_id)
        serializer = RoutineLinkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        link = BlueprintService().attach_routine_block(
            program, blueprint_id, serializer.validated_data["routine_block_id"]
        )
        return Response(
            {"success": True, "data": {"link_id": str(link.id), "order_index": link.order_index}},
            status=status.HTTP_201_CREATED,
        )


class BlueprintRoutineBlockDetailView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Curriculum"])
    def delete(self, request, program_id, blueprint_id, link_id):
        program = get_owned_program(request.user, program_id)
        BlueprintService().detach_routine_block(program, blueprint_id, link_id)
        return Response({"success": True})


# ============================================================
# WORKOUT LIBRARY
# ============================================================

class WorkoutLibraryListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workout Library"])
    def get(self, request):
        params = request.query_params
        page, page_size = parse_page_params(params.get("page", 1), params.get("page_size"))

        data = WorkoutLibraryService().list(
            page=page,
            page_size=page_size,
            search=params.get("search") or None,
            category=params.get("category") or None,
            workout_type=params.get("workout_type") or None,
        )
        return Response({"success": True, "data": data})


class WorkoutLibraryFiltersView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workout Library"])
    def get(self, request):
        return Response({"success": True, "data": WorkoutLibraryService().filters()})


class WorkoutLibraryDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Workout Library"])
    def get(self, request, library_id):
        item = WorkoutLibraryService().get(library_id)
        return Response({
            "success": True,
            "data": {
                **serialize_library_item(item),
                "recommendation_template": recommendation_template(item.workout_type),
            },
        })


class WorkoutLibraryCustomView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Workout Library"], request=WorkoutLibrarySerializer)
    def post(self, request):
        serializer = WorkoutLibrarySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = WorkoutLibraryService().create_custom(request.user, **serializer.validated_data)
        return Response(
            {"success": True, "data": WorkoutLibrarySerializer(item).data},
            status=status.HTTP_201_CREATED,
        )


# ============================================================
# ROUTINE BLOCKS
# ============================================================

class RoutineBlockListView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Routine Blocks"])
    def get(self, request):
        params = request.query_params
        page, page_size = parse_page_params(params.get("page", 1), params.get("page_size"))

        data = RoutineBlockService().list(
            request.user,
            page=page,
            page_size=page_size,
            search=params.get("search") or None,
            workout_format=params.get("workout_format") or None,
        )
        return Response({"success": True, "data": data})

    @extend_schema(tags=["Routine Blocks"], request=RoutineBlockSerializer)
    def post(self, request):
        serializer = RoutineBlockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        block = RoutineBlockService().create(request.user, **serializer.validated_data)
        return Response(
            {"success": True, "data": RoutineBlockSerializer(block).data},
            status=status.HTTP_201_CREATED,
        )


class RoutineBlockDetailView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Routine Blocks"])
    def get(self, request, block_id):
        block = RoutineBlockService().get(request.user, block_id)
        return Response({"success": True, "data": serialize_block(block)})

    @extend_schema(tags=["Routine Blocks"], request=RoutineBlockSerializer)
    def patch(self, request, block_id):
        serializer = RoutineBlockSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        block = RoutineBlockService().update(request.user, block_id, **serializer.validated_data)
        return Response({"success": True, "data": RoutineBlockSerializer(block).data})

    @extend_schema(tags=["Routine Blocks"])
    def delete(self, request, block_id):
        RoutineBlockService().delete(request.user, block_id)
        return Response({"success": True})


class RoutineItemListView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Routine Blocks"], request=RoutineItemCreateSerializer)
    def post(self, request, block_id):
        serializer = RoutineItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = RoutineBlockService().add_item(
            request.user,
            block_id,
            serializer.validated_data["library_id"],
            serializer.validated_data.get("recommendation"),
        )
        return Response(
            {"success": True, "data": serialize_item(item)},
            status=status.HTTP_201_CREATED,
        )


class RoutineItemReorderView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Routine Blocks"], request=RoutineItemOrderSerializer(many=True))
    def post(self, request, block_id):
        serializer = RoutineItemOrderSerializer(data=request.data.get("orders", []), many=True)
        serializer.is_valid(raise_exception=True)

        RoutineBlockService().update_item_order(request.user, block_id, serializer.validated_data)
        return Response({"success": True})


class RoutineItemDetailView(APIView):
    permission_classes = COACH_PERMISSIONS

    @extend_schema(tags=["Routine Blocks"], request=RoutineItemUpdateSerializer)
    def patch(self, request, item_id):
        serializer = RoutineItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = RoutineBlockService().update_item(
            request.user, item_id, serializer.validated_data["recommendation"]
        )
        return Response({"success": True, "data": serialize_item(item)})

    @extend_schema(tags=["Routine Blocks"])
    def delete(self, request, item_id):
        RoutineBlockService().delete_item(request.user, item_id)
        return Response({"success": True})
