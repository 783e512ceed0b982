import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class ScriptureConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'scripture'

    def ready(self):
        if not getattr(settings, "GENAI_API_KEY", ""):
            logger.warning(
                "GenAI API key not configured. Set GENAI_API_KEY (or GENAI_KEY); "
                "scripture generation and chat will fail until it is provided."
            )
