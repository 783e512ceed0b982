# scripture/speech.py
from __future__ import annotations

import base64
import logging
from typing import Callable, Optional

import google.auth
import google.auth.transport.requests
import requests

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def _default_token() -> str:
    # Application Default Credentials (compte de service de l'instance)
    creds, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
    creds.refresh(google.auth.transport.requests.Request())
    return creds.token


class SpeechSynthesizer:
    """
    Google Cloud Text-to-Speech. ``synthesize`` ne lève jamais :
    toute erreur est loggée et donne ``None``.
    """

    def __init__(
        self,
        *,
        project_id: str = "",
        base_url: str = "https://texttospeech.googleapis.com/v1",
        language_code: str = "en-US",
        voice_name: str = "en-US-Neural2-F",
        speaking_rate: float = 0.92,
        timeout: float = 20.0,
        token_provider: Callable[[], str] = _default_token,
        session: Optional[requests.Session] = None,
    ):
        self.project_id = project_id
        self.base_url = base_url.rstrip("/")
        self.language_code = language_code
        self.voice_name = voice_name
        self.speaking_rate = speaking_rate
        self.timeout = timeout
        self.token_provider = token_provider
        self.session = session or requests.Session()

    def _payload(self, text: str) -> dict:
        return {
            "input": {"text": text},
            "voice": {
                "languageCode": self.language_code,
                "name": self.voice_name,
                "ssmlGender": "FEMALE",
            },
            "audioConfig": {
                "audioEncoding": "MP3",
                "pitch": 0,
                "speakingRate": self.speaking_rate,
                "effectsProfileId": ["small-bluetooth-speaker-class-device"],
            },
        }

    def synthesize(self, text: str) -> Optional[bytes]:
        if not (text or "").strip():
            return None
        try:
            headers = {
                "Authorization": f"Bearer {self.token_provider()}",
                "Content-Type": "application/json",
            }
            if self.project_id:
                headers["x-goog-user-project"] = self.project_id
            r = self.session.post(
                f"{self.base_url}/text:synthesize",
                json=self._payload(text),
                headers=headers,
                timeout=self.timeout,
            )
            if r.status_code != 200:
                logger.error("TTS API error %s: %s", r.status_code, r.text[:500])
                return None
            audio = (r.json() or {}).get("audioContent")
            return base64.b64decode(audio) if audio else None
        except Exception:
            # La synthèse vocale est un bonus : jamais fatale pour l'appelant
            logger.exception("Voice synthesis error")
            return None
