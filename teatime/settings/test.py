# teatime/settings/test.py
from .base import *

DEBUG = False
SECRET_KEY = "teatime-test-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

SCRIPTURE_STORE_BACKEND = "database"
SCRIPTURE_TIMEZONE = "America/Denver"
SCRIPTURE_DEFAULT_THEME = "Encouragement"
SCRIPTURE_VERSION_CODES = ["KJV", "NKJV", "NIV", "MSG", "NLT", "AMP"]
SCRIPTURE_MAX_RETRIES = 2
SCRIPTURE_NOTIFY_TOPIC = ""
SCRIPTURE_ADMIN_EMAILS = []

GENAI_API_KEY = "test-key"
TTS_ENABLED = False

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {"chat": "1000/min"},
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"], "level": "WARNING"},
}
