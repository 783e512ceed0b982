# scripture/genai.py
from __future__ import annotations

import logging
from typing import Optional

import requests

from scripture.exceptions import NotConfigured, UpstreamError, UpstreamHTTPError

logger = logging.getLogger(__name__)


class GenerativeClient:
    """
    Client REST Gemini (``models/{model}:generateContent``).
    Un prompt en entrée, le texte brut en sortie, ou une exception.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        *,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate_text(self, prompt: str, temperature: float = 0.7) -> str:
        if not self.api_key:
            logger.error("GenAI API key not configured; refusing to call %s", self.model)
            raise NotConfigured("GenAI API key not configured")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature},
        }
        try:
            r = self.session.post(
                self._url(),
                json=payload,
                # la clé ne doit jamais apparaître dans l'URL
                headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamError(f"GenAI request failed: {exc}") from exc

        if not 200 <= r.status_code < 300:
            logger.warning("GenAI HTTP error %s: %s", r.status_code, r.text[:500])
            raise UpstreamHTTPError(r.status_code, r.text)

        try:
            data = r.json()
        except ValueError as exc:
            raise UpstreamError("GenAI returned a non-JSON body") from exc

        # Le texte est dans candidates[0].content.parts[].text
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text") or "" for p in parts if isinstance(p, dict)).strip()
