# core/views.py

"""
CORE VIEWS

System-level views: health checks, image upload and error handlers.
"""

import logging
from django.http import JsonResponse
from django.db import connection
from django.core.cache import cache
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.parsers import MultiPartParser
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated

from core.exceptions import ValidationFailed
from core.storage import StorageClient

logger = logging.getLogger(__name__)


class HealthCheckView(APIView):
    """
    Health check endpoint.

    Checks:
    - Database connectivity
    - Cache connectivity
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Health"], summary="Database and cache health")
    def get(self, request):
        health_status = {
            "status": "healthy",
            "checks": {}
        }

        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            health_status["checks"]["database"] = "ok"
        except Exception as e:
            logger.error(f"HEALTH_DATABASE_ERROR: {e}")
            health_status["checks"]["database"] = f"error: {str(e)}"
            health_status["status"] = "unhealthy"

        try:
            cache.set("health_check", "ok", 10)
            if cache.get("health_check") == "ok":
                health_status["checks"]["cache"] = "ok"
            else:
                health_status["checks"]["cache"] = "error: cache read failed"
                health_status["status"] = "unhealthy"
        except Exception as e:
            logger.error(f"HEALTH_CACHE_ERROR: {e}")
            health_status["checks"]["cache"] = f"error: {str(e)}"
            health_status["status"] = "unhealthy"

        status_code = 200 if health_status["status"] == "healthy" else 503
        return Response(health_status, status=status_code)


class ReadinessCheckView(APIView):
    """
    Readiness probe. 200 when the database answers.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Health"], summary="Readiness probe")
    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            return Response({"status": "ready"})
        except Exception as e:
            logger.error(f"Readiness check failed: {e}")
            return Response(
                {"status": "not ready", "error": str(e)},
                status=503
            )


class LivenessCheckView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Health"], summary="Liveness probe")
    def get(self, request):
        return Response({"status": "alive"})


class ImageUploadView(APIView):
    """
    POST /api/storage/upload/

    Multipart body: file (required), bucket (optional).
    Returns {public_url, storage_path}.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser]

    @extend_schema(tags=["Storage"], summary="Upload an image to object storage")
    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            raise ValidationFailed("file is required.")

        result = StorageClient().upload_image(upload, bucket=request.data.get("bucket") or None)
        logger.info(f"Image uploaded by {request.user.id}: {result['storage_path']}")

        return Response(
            {"success": True, "data": result},
            status=status.HTTP_201_CREATED
        )


def custom_404(request, exception=None):
    """Custom 404 error handler"""
    return JsonResponse(
        {
            "success": False,
            "error_code": "not_found",
            "message": "The requested resource was not found.",
        },
        status=404
    )


def custom_500(request):
    """Custom 500 error handler"""
    return JsonResponse(
        {
            "success": False,
            "error_code": "server_error",
            "message": "Server error. Please try again later.",
        },
        status=500
    )
