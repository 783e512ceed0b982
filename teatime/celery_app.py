# teatime/celery_app.py
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "teatime.settings.dev")

app = Celery("teatime")
# Toutes les clés CELERY_* de settings (broker, timezone, beat_schedule…)
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks(["teatime"])
