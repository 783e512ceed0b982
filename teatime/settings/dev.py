# teatime/settings/dev.py
from .base import *

DEBUG = True
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "10.0.2.2"]

# En local : ORM Django au lieu de Firestore, sauf si explicitement demandé
SCRIPTURE_STORE_BACKEND = os.environ.get("SCRIPTURE_STORE_BACKEND", "database")

CSRF_COOKIE_SECURE = False
SESSION_COOKIE_SECURE = False

CORS_ALLOWED_ORIGINS += [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
CSRF_TRUSTED_ORIGINS += [
    "http://127.0.0.1:8000",
    "http://localhost:3000",
]
