# core/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

# API Documentation
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

from core.views import ImageUploadView

urlpatterns = [
    path("admin/", admin.site.urls),

    # Accounts & auth
    path("api/auth/", include("users.api.urls")),

    # Coach profiles
    path("api/coaches/", include("coach_profiles.urls")),

    # Programs, curriculum, library, routine blocks
    path("api/programs/", include("programs.api.urls")),

    # Orders, payments, enrollments
    path("api/billing/", include("billing.api.urls")),

    # Coach-side member management & dashboard
    path("api/members/", include("members.api.urls")),

    # Workout logs, section records, performance
    path("api/progress/", include("progress.api.urls")),

    # Image upload
    path("api/storage/upload/", ImageUploadView.as_view(), name="image-upload"),

    # API Documentation (Swagger/ReDoc)
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Health checks
    path("health/", include("core.health_urls")),
]

handler404 = "core.views.custom_404"
handler500 = "core.views.custom_500"

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
