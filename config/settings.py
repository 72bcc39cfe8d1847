# =========================
# FILE: config/settings.py
# =========================
import os
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-insecure-key")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if not DEBUG else ["*"]

TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "America/Mexico_City")
USE_TZ = True

STATIC_URL = "/static/"
STATICFILES_DIRS = [BASE_DIR / "static"] if (BASE_DIR / "static").exists() else []
STATIC_ROOT = BASE_DIR / "staticfiles"


INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "channels",
    "corsheaders",
    "core.apps.CoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

# Los registros viven en el mock store remoto; no hay BD local.
DATABASES = {}

# Sin sesiones: los mensajes del formulario viajan en cookie
MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

REST_FRAMEWORK = {
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
}

CORS_ALLOW_ALL_ORIGINS = True

ASGI_APPLICATION = "config.asgi.application"

REDIS_URL = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")

if os.getenv("CHANNEL_LAYER_BACKEND", "redis") == "memory":
    CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
    }
else:
    redis = urlparse(REDIS_URL)
    CHANNEL_LAYERS = {
        "default": {
            "BACKEND": "channels_redis.core.RedisChannelLayer",
            "CONFIG": {"hosts": [(redis.hostname, redis.port)]},
        }
    }

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "core": {
            "handlers": ["console"],
            "level": os.getenv("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

# -------------------------
# Remote store / monitoreo
# -------------------------
REMOTE_STORE_URL = os.getenv(
    "REMOTE_STORE_URL",
    "https://68bb0de784055bce63f1053b.mockapi.io/api/v1/dispositivos_IoT",
)
IP_LOOKUP_URL = os.getenv("IP_LOOKUP_URL", "https://api.ipify.org?format=json")
FALLBACK_CLIENT_IP = os.getenv("FALLBACK_CLIENT_IP", "127.0.0.1")
COMMANDS_TIME_ZONE = os.getenv("COMMANDS_TIME_ZONE", "America/Mexico_City")
REMOTE_STORE_TIMEOUT_SECONDS = float(os.getenv("REMOTE_STORE_TIMEOUT_SECONDS", "10"))

MONITOR_POLL_INTERVAL_SECONDS = float(os.getenv("MONITOR_POLL_INTERVAL_SECONDS", "2"))
MONITOR_RETRY_DELAY_SECONDS = float(os.getenv("MONITOR_RETRY_DELAY_SECONDS", "5"))
MONITOR_RECENT_LIMIT = int(os.getenv("MONITOR_RECENT_LIMIT", "10"))
LAST_RECORDS_LIMIT = int(os.getenv("LAST_RECORDS_LIMIT", "5"))
