"""
Django settings for clinicpay project.
"""

import sys
from pathlib import Path

import dj_database_url  # pip install dj-database-url
from decouple import Csv, config  # pip install python-decouple

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Check if we're running tests
TESTING = "test" in sys.argv or "pytest" in sys.modules

# SECURITY SETTINGS
SECRET_KEY = config("SECRET_KEY", default="" if not TESTING else "test-secret-key")
if not SECRET_KEY:
    raise ValueError("SECRET_KEY environment variable must be set")

DEBUG = config("DEBUG", default=False, cast=bool)

ALLOWED_HOSTS = config(
    "ALLOWED_HOSTS",
    default="localhost,127.0.0.1" + (",*" if DEBUG else ""),
    cast=Csv(),
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "corsheaders",  # pip install django-cors-headers
    # Local apps
    "core",
    "payroll",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",  # Must be first
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "clinicpay.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "clinicpay.wsgi.application"

# Database settings
# Nothing is persisted by the payroll surface; the database only backs
# Django's own machinery. DATABASE_URL wins over the SQLite fallback.
DATABASE_URL = config("DATABASE_URL", default="")

if DATABASE_URL:
    DATABASES = {"default": dj_database_url.parse(DATABASE_URL)}
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

# Production security settings
if not DEBUG and not TESTING:
    SECURE_CONTENT_TYPE_NOSNIFF = True
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_SECONDS = 31536000  # 1 year
    SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
    SECURE_REFERRER_POLICY = "same-origin"
    X_FRAME_OPTIONS = "DENY"

# CORS settings
CORS_ALLOWED_ORIGINS = config(
    "CORS_ALLOWED_ORIGINS",
    default="http://localhost:3000,http://127.0.0.1:3000",
    cast=Csv(),
)
CORS_ALLOW_ALL_ORIGINS = DEBUG

# REST Framework settings
REST_FRAMEWORK = {
    # Calculation endpoints are stateless and carry no authentication
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "EXCEPTION_HANDLER": "core.exceptions.custom_exception_handler",
    "COERCE_DECIMAL_TO_STRING": True,
}

# Payroll engine configuration, turned into PayrollRules by
# payroll.services.payroll_rules_from_settings()
CLINIC_TIME_ZONE = config("CLINIC_TIME_ZONE", default="Asia/Taipei")

PAYROLL_RULES = {
    "daily_normal_caps": {
        "normal": 8,
        "2week": 10,
        "4week": 10,
        "8week": 8,
        "none": 8,
    },
    "monthly_hour_divisor": config("PAYROLL_MONTHLY_HOUR_DIVISOR", default="240"),
    "late_tolerance_minutes": config(
        "PAYROLL_LATE_TOLERANCE_MINUTES", default=1, cast=int
    ),
    "time_zone": CLINIC_TIME_ZONE,
}

PAYROLL_DEFAULT_NHI_RATE = config("PAYROLL_DEFAULT_NHI_RATE", default="0.8")
PAYROLL_DEFAULT_HOURS_PER_SHIFT = config(
    "PAYROLL_DEFAULT_HOURS_PER_SHIFT", default="3.5"
)

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = CLINIC_TIME_ZONE
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Create logs directory if it doesn't exist
LOG_DIR = Path(config("LOG_DIR", default=str(BASE_DIR / "logs")))
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Logging configuration with rotation
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "pii_redactor": {"()": "clinicpay.logging_filters.PIIRedactorFilter"},
    },
    "formatters": {
        "verbose": {"format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}", "style": "{"},
        "simple":  {"format": "{levelname} {asctime} {message}", "style": "{"},
        "minimal": {"format": "{levelname} {message}", "style": "{"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "minimal",
            "level": "DEBUG" if DEBUG else "INFO",
            "filters": ["pii_redactor"],
        },
        "django_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / "django.log",
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "formatter": "simple",
            "level": "INFO",
            "encoding": "utf-8",
            "filters": ["pii_redactor"],
        },
        "payroll_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / "payroll.log",
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "verbose",
            "level": "INFO",
            "encoding": "utf-8",
            "filters": ["pii_redactor"],
        },
    },
    "loggers": {
        "django":  {"handlers": ["django_file"] if not DEBUG else ["console"], "level": "INFO", "propagate": False},
        "payroll": {"handlers": ["payroll_file", "console"], "level": "DEBUG" if DEBUG else "INFO", "propagate": False},
        "core":    {"handlers": ["django_file", "console"], "level": "INFO", "propagate": False},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
}
