import logging

from celery import shared_task
from django.conf import settings

from scripture.services import build_daily_resolver
from scripture.types import date_key
from .notifications.fcm import send_daily_scripture

logger = logging.getLogger(__name__)


def notify_daily_scripture(scripture, date_str: str) -> bool:
    """Push FCM vers le topic configuré ; un échec est loggé, jamais propagé."""
    topic = getattr(settings, "SCRIPTURE_NOTIFY_TOPIC", "")
    if not topic:
        return False
    version = settings.SCRIPTURE_VERSION_CODES[0] if settings.SCRIPTURE_VERSION_CODES else "KJV"
    try:
        send_daily_scripture(topic, scripture, date_str=date_str, version=version)
    except Exception:
        logger.exception("[FCM][%s] daily scripture notification failed", topic)
        return False
    return True


@shared_task
def generate_daily_scripture():
    """
    Tâche planifiée (django-celery-beat, fuseau SCRIPTURE_TIMEZONE) :
    génère et persiste le verset du jour si absent, puis notifie.
    Ne renvoie rien à un client ; la voie HTTP le trouvera en cache.
    """
    resolver = build_daily_resolver()
    today = resolver.today()
    try:
        scripture, created = resolver.run_scheduled(today)
    except Exception:
        logger.exception("Error generating daily scripture for %s", date_key(today))
        raise

    if created:
        notify_daily_scripture(scripture, date_key(today))
    return {"date": date_key(today), "reference": scripture.reference, "created": created}
