# teatime/settings/base.py
import os
import re
from pathlib import Path

from celery.schedules import crontab

BASE_DIR = Path(__file__).resolve().parent.parent.parent


def env_int(key: str, default: int) -> int:
    val = os.getenv(key)
    try:
        return int(val) if val is not None else default
    except (TypeError, ValueError):
        return default


def env_float(key: str, default: float) -> float:
    val = os.getenv(key)
    try:
        return float(val) if val is not None else default
    except (TypeError, ValueError):
        return default


def env_bool(key: str, default: bool) -> bool:
    val = os.getenv(key)
    if val is None or val.strip() == "":
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _split_csv_env(name: str, default: str = "") -> list[str]:
    raw = os.getenv(name, default)
    return [x.strip() for x in raw.split(",") if x.strip()]


def _with_scheme(origin: str) -> str:
    # si déjà un schéma → OK
    if origin.startswith(("http://", "https://")):
        return origin
    # localhost + IP → http par défaut (dev)
    if origin in ("localhost",) or re.match(r"^\d{1,3}(\.\d{1,3}){3}(:\d+)?$", origin):
        return f"http://{origin}"
    # par défaut pour un domaine → https
    return f"https://{origin}"


SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-teatime-dev-key-change-me")

DEBUG = env_bool("DEBUG", False)

ALLOWED_HOSTS = _split_csv_env("ALLOWED_HOSTS")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "corsheaders",
    "drf_yasg",
    "django_celery_beat",
    "scripture",
    "api",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "teatime.urls"

TEMPLATES = [{
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
}]

WSGI_APPLICATION = "teatime.wsgi.application"
ASGI_APPLICATION = "teatime.asgi.application"

# DB: par défaut sqlite (override en prod)
DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("DB_USER", ""),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", ""),
        "PORT": os.environ.get("DB_PORT", ""),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "api.authentication.FirebaseAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_THROTTLE_RATES": {
        "chat": os.environ.get("CHAT_THROTTLE_RATE", "30/min"),
    },
}

CORS_ALLOW_CREDENTIALS = True

# CORS/CSRF: schéma requis
CORS_ALLOWED_ORIGINS = [_with_scheme(o) for o in _split_csv_env("CORS_ALLOWED_ORIGINS")]
CSRF_TRUSTED_ORIGINS = [_with_scheme(o) for o in _split_csv_env("CSRF_TRUSTED_ORIGINS")]

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# Logging minimal (override prod)
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"console": {"class": "logging.StreamHandler"}},
    "root": {"handlers": ["console"], "level": "INFO"},
}

# ====== Verset du jour ======
# Le "jour" suit le calendrier civil de l'assemblée, jamais celui de l'hôte.
SCRIPTURE_TIMEZONE = os.environ.get("SCRIPTURE_TIMEZONE", "America/Denver")
SCRIPTURE_DEFAULT_THEME = os.environ.get("SCRIPTURE_DEFAULT_THEME", "Encouragement")
SCRIPTURE_VERSION_CODES = _split_csv_env("SCRIPTURE_VERSION_CODES", "KJV,NKJV,NIV,MSG,NLT,AMP")
SCRIPTURE_TEMPERATURE = env_float("SCRIPTURE_TEMPERATURE", 0.7)
SCRIPTURE_MAX_RETRIES = env_int("SCRIPTURE_MAX_RETRIES", 2)
SCRIPTURE_CHURCH_NAME = os.environ.get("SCRIPTURE_CHURCH_NAME", "RCCG The Eagles Ark")
SCRIPTURE_SCHEDULE_HOUR = env_int("SCRIPTURE_SCHEDULE_HOUR", 0)
SCRIPTURE_SCHEDULE_MINUTE = env_int("SCRIPTURE_SCHEDULE_MINUTE", 0)
SCRIPTURE_NOTIFY_TOPIC = os.environ.get("SCRIPTURE_NOTIFY_TOPIC", "")
# vide → tout utilisateur authentifié peut modifier les thèmes
SCRIPTURE_ADMIN_EMAILS = [e.lower() for e in _split_csv_env("SCRIPTURE_ADMIN_EMAILS")]

# "firestore" (document meta/dailyScripture) ou "database" (ORM Django)
SCRIPTURE_STORE_BACKEND = os.environ.get("SCRIPTURE_STORE_BACKEND", "firestore")
FIRESTORE_COLLECTION = os.environ.get("FIRESTORE_COLLECTION", "meta")

# ====== Gemini (generateContent) ======
GENAI_API_KEY = os.environ.get("GENAI_API_KEY") or os.environ.get("GENAI_KEY", "")
GENAI_MODEL = os.environ.get("GENAI_MODEL", "gemini-2.5-flash")
GENAI_BASE_URL = os.environ.get("GENAI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
GENAI_TIMEOUT = env_float("GENAI_TIMEOUT", 30.0)

# ====== Google Cloud Text-to-Speech ======
TTS_ENABLED = env_bool("TTS_ENABLED", True)
TTS_BASE_URL = os.environ.get("TTS_BASE_URL", "https://texttospeech.googleapis.com/v1")
TTS_LANGUAGE_CODE = os.environ.get("TTS_LANGUAGE_CODE", "en-US")
TTS_VOICE_NAME = os.environ.get("TTS_VOICE_NAME", "en-US-Neural2-F")
TTS_SPEAKING_RATE = env_float("TTS_SPEAKING_RATE", 0.92)
TTS_TIMEOUT = env_float("TTS_TIMEOUT", 20.0)
GOOGLE_CLOUD_PROJECT = os.environ.get("GOOGLE_CLOUD_PROJECT") or os.environ.get("GCLOUD_PROJECT", "")

# ====== Firebase ======
# Option A — chemin vers le fichier de service account (recommandé en local/Docker)
FIREBASE_SERVICE_ACCOUNT_PATH = os.environ.get("FIREBASE_SERVICE_ACCOUNT_PATH", "")
# Option B — contenu JSON du service account (brut ou base64) en variable d'env
FIREBASE_SERVICE_ACCOUNT_JSON = os.environ.get("FIREBASE_SERVICE_ACCOUNT_JSON", "")
# Option C — Application Default Credentials (Cloud Run, GCE…)
USE_GOOGLE_APPLICATION_DEFAULT = env_bool("USE_GOOGLE_APPLICATION_DEFAULT", False)
FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID", "")

# ====== Celery ======
CELERY_BROKER_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = SCRIPTURE_TIMEZONE
CELERY_BEAT_SCHEDULER = "django_celery_beat.schedulers:DatabaseScheduler"
CELERY_BEAT_SCHEDULE = {
    "daily-scripture": {
        "task": "teatime.tasks.generate_daily_scripture",
        "schedule": crontab(hour=SCRIPTURE_SCHEDULE_HOUR, minute=SCRIPTURE_SCHEDULE_MINUTE),
    },
}
