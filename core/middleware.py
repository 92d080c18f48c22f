# core/middleware.py

"""
CUSTOM MIDDLEWARE

Request/response processing middleware for:
- Request logging
- Security headers
- Error handling
- Maintenance mode
"""

import time
import uuid
import logging
from django.conf import settings
from django.utils.deprecation import MiddlewareMixin
from django.http import JsonResponse

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000


class RequestLoggingMiddleware(MiddlewareMixin):
    """
    Log all incoming requests with timing information.

    Adds request ID for tracing across services.
    """

    def process_request(self, request):
        request.request_id = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())[:8]
        request.start_time = time.monotonic()

    def process_response(self, request, response):
        if hasattr(request, "start_time"):
            duration_ms = (time.monotonic() - request.start_time) * 1000
            response["X-Response-Time"] = f"{duration_ms:.2f}ms"

            logger.info(
                f"[{getattr(request, 'request_id', 'unknown')}] {request.method} {request.path} "
                f"-> {response.status_code} ({duration_ms:.2f}ms)"
            )

            if duration_ms > SLOW_REQUEST_MS:
                logger.warning(
                    f"Slow request: {request.method} {request.path} "
                    f"took {duration_ms:.2f}ms"
                )

        if hasattr(request, "request_id"):
            response["X-Request-ID"] = request.request_id

        return response


class SecurityHeadersMiddleware(MiddlewareMixin):
    """
    Add security headers to all responses.
    """

    def process_response(self, request, response):
        response["X-Content-Type-Options"] = "nosniff"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response["Permissions-Policy"] = (
            "accelerometer=(), camera=(), geolocation=(), "
            "gyroscope=(), magnetometer=(), microphone=(), usb=()"
        )
        if "X-Frame-Options" not in response:
            response["X-Frame-Options"] = "DENY"
        return response


class ExceptionHandlerMiddleware(MiddlewareMixin):
    """
    Global handler for errors that escaped the DRF exception handler.

    In DEBUG the exception propagates to Django's technical 500 page.
    """

    def process_exception(self, request, exception):
        logger.exception(
            f"Unhandled exception in {request.method} {request.path}: {exception}"
        )

        if settings.DEBUG:
            return None

        return JsonResponse(
            {
                "success": False,
                "error_code": "server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": getattr(request, "request_id", None),
            },
            status=500
        )


class MaintenanceModeMiddleware(MiddlewareMixin):
    """
    When MAINTENANCE_MODE is on, returns 503 for everything
    except health checks and the admin.
    """

    ALLOWED_PREFIXES = ("/health/", "/admin/")

    def process_request(self, request):
        if getattr(settings, "MAINTENANCE_MODE", False):
            if not request.path.startswith(self.ALLOWED_PREFIXES):
                return JsonResponse(
                    {
                        "success": False,
                        "error_code": "maintenance",
                        "message": "The service is under maintenance. Please try again later.",
                    },
                    status=503
                )

        return None
