# teatime/__init__.py

# Ne pas casser runserver/migrations/tests si Celery n'est pas dispo au chargement.
# (Celery sera importée par les workers/beat via -A teatime.celery_app:app)
try:
    from .celery_app import app as celery_app  # pragma: no cover
except ImportError:
    celery_app = None

__all__ = ("celery_app",)
