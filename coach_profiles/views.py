from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from core.permissions import IsCoach
from . import services
from .serializers import (
    CoachProfilePublicSerializer,
    CoachProfilePrivateSerializer,
)


class MyCoachProfileView(APIView):
    """CRUD on the signed-in coach's own profile."""
    permission_classes = [IsAuthenticated, IsCoach]

    @extend_schema(tags=["Coach Profile"], responses=CoachProfilePrivateSerializer)
    def get(self, request):
        profile = services.get_my_profile(request.user)
        return Response({"success": True, "data": CoachProfilePrivateSerializer(profile).data})

    @extend_schema(tags=["Coach Profile"], request=CoachProfilePrivateSerializer)
    def post(self, request):
        serializer = CoachProfilePrivateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = services.create_profile(request.user, **serializer.validated_data)
        return Response(
            {"success": True, "data": CoachProfilePrivateSerializer(profile).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Coach Profile"], request=CoachProfilePrivateSerializer)
    def patch(self, request):
        serializer = CoachProfilePrivateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        profile = services.update_profile(request.user, **serializer.validated_data)
        return Response({"success": True, "data": CoachProfilePrivateSerializer(profile).data})

    @extend_schema(tags=["Coach Profile"])
    def delete(self, request):
        services.delete_profile(request.user)
        return Response({"success": True})


class CoachProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Coach Profile"], responses=CoachProfilePublicSerializer)
    def get(self, request, coach_id):
        profile = services.get_public_profile(coach_id)

        if profile.account_id == request.user.id:
            serializer = CoachProfilePrivateSerializer(profile)
        else:
            serializer = CoachProfilePublicSerializer(profile)

        return Response({"success": True, "data": serializer.data})
