# core/settings.py
from pathlib import Path
from datetime import timedelta
import os
import sys
from dotenv import load_dotenv

# =============================================================================
# BASE DIR & ENV
# =============================================================================

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# =============================================================================
# SECURITY
# =============================================================================

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("DJANGO_SECRET_KEY is not set")

DEBUG = os.getenv("DEBUG", "False").lower() == "true"

ALLOWED_HOSTS = os.getenv(
    "ALLOWED_HOSTS", "127.0.0.1,localhost"
).split(",")

MAINTENANCE_MODE = os.getenv("MAINTENANCE_MODE", "False").lower() == "true"

# =============================================================================
# APPLICATIONS
# =============================================================================

INSTALLED_APPS = [
    # Django core
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "rest_framework",
    "rest_framework_simplejwt",
    "rest_framework_simplejwt.token_blacklist",
    "drf_spectacular",

    # Local apps
    "core.apps.CoreConfig",
    "users.apps.UsersConfig",
    "coach_profiles.apps.CoachProfilesConfig",
    "programs.apps.ProgramsConfig",
    "billing.apps.BillingConfig",
    "members.apps.MembersConfig",
    "progress.apps.ProgressConfig",
]

# =============================================================================
# MIDDLEWARE
# =============================================================================

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "core.middleware.RequestLoggingMiddleware",
    "core.middleware.MaintenanceModeMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "core.middleware.SecurityHeadersMiddleware",
    "core.middleware.ExceptionHandlerMiddleware",
]

# =============================================================================
# AUTH
# =============================================================================

AUTH_USER_MODEL = "users.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
]

# =============================================================================
# URLS & TEMPLATES
# =============================================================================

ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "core.wsgi.application"

# =============================================================================
# DATABASE: POSTGRESQL
# =============================================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRES_DB", "coachfit"),
        "USER": os.getenv("POSTGRES_USER", "postgres"),
        "PASSWORD": os.getenv("POSTGRES_PASSWORD"),
        "HOST": os.getenv("POSTGRES_HOST", "127.0.0.1"),
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
        "CONN_MAX_AGE": 600,
        "ATOMIC_REQUESTS": True,
        "OPTIONS": {"connect_timeout": 10},
    }
}

if not DATABASES["default"]["PASSWORD"] and not DEBUG:
    raise RuntimeError("POSTGRES_PASSWORD is not set")

# =============================================================================
# I18N
# =============================================================================

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Asia/Seoul"
USE_I18N = True
USE_TZ = True

# =============================================================================
# STATIC & MEDIA
# =============================================================================

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# =============================================================================
# REST FRAMEWORK
# =============================================================================

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework_simplejwt.authentication.JWTAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "core.exceptions.custom_exception_handler",
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        "anon": os.getenv("RATE_ANON", "100/hour"),
        "user": os.getenv("RATE_USER", "1000/hour"),
        "auth": os.getenv("RATE_AUTH", "20/minute"),
    },
}

# =============================================================================
# JWT
# =============================================================================

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=30),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=7),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": True,
    "UPDATE_LAST_LOGIN": True,
    "SIGNING_KEY": SECRET_KEY,
    "AUTH_HEADER_TYPES": ("Bearer",),
}

# =============================================================================
# TEST MODE
# =============================================================================

TESTING = "test" in sys.argv or "pytest" in sys.modules

# =============================================================================
# DRF SPECTACULAR (API DOCUMENTATION)
# =============================================================================

SPECTACULAR_SETTINGS = {
    "TITLE": "CoachFit API",
    "DESCRIPTION": """
    Marketplace where coaches author structured fitness programs and sell them to members.

    **Core Features:**
    - Email sign-up / sign-in (identity provider backed)
    - Program, blueprint and section authoring
    - Workout library & routine blocks
    - Toss Payments checkout, orders & enrollments
    - Coach member management & dashboard
    - Workout logs, section records & PR tracking
    """,
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/",
    "SWAGGER_UI_SETTINGS": {
        "deepLinking": True,
        "persistAuthorization": True,
        "displayOperationId": True,
    },
}

# =============================================================================
# CACHING
# =============================================================================

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "coachfit-default",
        "TIMEOUT": int(os.getenv("CACHE_TIMEOUT_SECONDS", "300")),
        "OPTIONS": {
            "MAX_ENTRIES": 1000,
        }
    }
}

# =============================================================================
# LOGGING
# =============================================================================

LOG_DIR = os.getenv("LOG_DIR", "")
APP_LOG_LEVEL = "DEBUG" if DEBUG else "INFO"
APP_LOG_HANDLERS = ["console", "file"] if LOG_DIR else ["console"]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {name} {message}",
            "style": "{",
        },
        "simple": {
            "format": "[{levelname}] {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.getenv("LOG_LEVEL", "INFO"),
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}

if LOG_DIR:
    LOGGING["handlers"]["file"] = {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.path.join(LOG_DIR, "coachfit.log"),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 5,
        "formatter": "verbose",
    }

for _app in ("core", "users", "coach_profiles", "programs", "billing", "members", "progress"):
    LOGGING["loggers"][_app] = {
        "handlers": APP_LOG_HANDLERS,
        "level": APP_LOG_LEVEL,
        "propagate": False,
    }

# =============================================================================
# PAYMENT GATEWAY (TOSS PAYMENTS)
# =============================================================================

PAYMENT_CONFIG = {
    "SECRET_KEY": os.getenv("TOSS_PAYMENTS_SECRET_KEY", ""),
    "CLIENT_KEY": os.getenv("TOSS_PAYMENTS_CLIENT_KEY", ""),
    "API_BASE": os.getenv("TOSS_PAYMENTS_API_BASE", "https://api.tosspayments.com"),
    "TIMEOUT_SECONDS": 10,
}

# =============================================================================
# BACKEND-AS-A-SERVICE (SUPABASE AUTH & STORAGE)
# =============================================================================

SUPABASE_CONFIG = {
    "URL": os.getenv("SUPABASE_URL", "").rstrip("/"),
    "ANON_KEY": os.getenv("SUPABASE_ANON_KEY", ""),
    "SERVICE_ROLE_KEY": os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
    "STORAGE_BUCKET": os.getenv("SUPABASE_STORAGE_BUCKET", "images"),
    "PASSWORD_RESET_REDIRECT": os.getenv("PASSWORD_RESET_REDIRECT", ""),
    "TIMEOUT_SECONDS": 10,
}

# =============================================================================
# MEMBERS & DASHBOARD
# =============================================================================

MEMBER_CONFIG = {
    "EXPIRING_WITHIN_DAYS": 7,
    "RECENT_PURCHASES_LIMIT": 10,
}

PAGINATION_CONFIG = {
    "DEFAULT_PAGE_SIZE": 20,
    "MAX_PAGE_SIZE": 100,
}

# =============================================================================
# FILE UPLOAD SETTINGS
# =============================================================================

FILE_UPLOAD_MAX_MEMORY_SIZE = 5242880  # 5MB
DATA_UPLOAD_MAX_MEMORY_SIZE = 5242880  # 5MB

UPLOAD_CONFIG = {
    "MAX_IMAGE_SIZE_MB": 5,
    "ALLOWED_IMAGE_MIMES": {
        "image/jpeg": "jpg",
        "image/png": "png",
        "image/webp": "webp",
        "image/gif": "gif",
    },
}

# =============================================================================
# SECURITY ENHANCEMENTS
# =============================================================================

SESSION_COOKIE_SECURE = not DEBUG
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"

CSRF_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_HTTPONLY = True
CSRF_COOKIE_SAMESITE = "Lax"

if not DEBUG and not TESTING:
    SECURE_SSL_REDIRECT = True
    SECURE_HSTS_SECONDS = 31536000  # 1 year
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = "DENY"
