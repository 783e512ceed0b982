# teatime/notifications/fcm.py
from __future__ import annotations

import re
import time
from datetime import timedelta
from typing import Dict, Optional

from firebase_admin import messaging

from scripture.types import Scripture
from teatime.firebase import ensure_initialized

# -----------------------------
# Helpers génériques
# -----------------------------

_TOPIC_RE = re.compile(r"[^A-Za-z0-9_-]")


def _normalize_topic(topic: str) -> str:
    """
    Nettoie le topic pour respecter la contrainte FCM.
    """
    topic = (topic or "").strip()
    topic = topic.replace(" ", "_")
    topic = _TOPIC_RE.sub("_", topic)
    return topic or "default"


def _str_dict(d: Optional[Dict]) -> Dict[str, str]:
    return {str(k): str(v) for k, v in (d or {}).items()}


def _retryable_error(code: Optional[str]) -> bool:
    """
    Erreurs transitoires que l'on peut retenter.
    """
    return code in {"internal", "unavailable", "deadline-exceeded", "unknown"}


def _sleep_backoff(attempt: int, base: float = 0.3, cap: float = 3.0):
    delay = min(cap, base * (2 ** (attempt - 1)))  # 0.3, 0.6, 1.2, 2.4, 3.0…
    time.sleep(delay)


# -----------------------------
# Options plateforme
# -----------------------------

def _android_config(ttl_seconds: Optional[int] = None, priority_high: bool = True):
    # FCM max TTL is 4 weeks
    MAX_TTL = 28 * 24 * 3600
    ttl = None
    if ttl_seconds is not None:
        ttl = timedelta(seconds=max(0, min(int(ttl_seconds), MAX_TTL)))
    return messaging.AndroidConfig(priority="high" if priority_high else "normal", ttl=ttl)


def _webpush_config(tag: str = "daily-scripture"):
    # le service worker web affiche la notif avec ce tag (remplace la précédente)
    return messaging.WebpushConfig(notification=messaging.WebpushNotification(tag=tag))


# -----------------------------
# Envoi
# -----------------------------

def send_to_topic(
    topic: str,
    title: str,
    body: str,
    data: dict | None = None,
    *,
    ttl_seconds: Optional[int] = 24 * 3600,
    dry_run: bool = False,
    max_retries: int = 3,
):
    ensure_initialized()
    msg = messaging.Message(
        notification=messaging.Notification(title=title, body=body),
        data=_str_dict(data),
        topic=_normalize_topic(topic),
        android=_android_config(ttl_seconds),
        webpush=_webpush_config(),
    )
    attempt = 0
    while True:
        attempt += 1
        try:
            return messaging.send(msg, dry_run=dry_run)
        except Exception as e:  # firebase_admin.exceptions.FirebaseError
            code = getattr(e, "code", None)
            if attempt < max_retries and _retryable_error(str(code).lower() if code else None):
                _sleep_backoff(attempt)
                continue
            raise


# -----------------------------
# Helpers "Verset du jour"
# -----------------------------

def scripture_title() -> str:
    return "Tea Time with the Word"


def scripture_body(reference: str, text: str, *, max_text_len: int = 140) -> str:
    text = " ".join((text or "").split())
    if len(text) > max_text_len:
        text = text[: max_text_len - 1].rstrip() + "…"
    if not text:
        return f"Your daily scripture is ready: {reference}"
    return f"{reference} — {text}"


def scripture_data_payload(reference: str, *, date_str: str, version: str) -> Dict[str, str]:
    return _str_dict(
        {
            "type": "DAILY_SCRIPTURE",
            "reference": reference,
            "date": date_str,
            "version": version,
        }
    )


def send_daily_scripture(
    topic: str,
    scripture: Scripture,
    *,
    date_str: str,
    version: str = "KJV",
    dry_run: bool = False,
):
    """
    Raccourci : pousse le verset du jour vers /topics/{topic}
    """
    text = scripture.versions.get(version) or next(iter(scripture.versions.values()), "")
    return send_to_topic(
        topic,
        scripture_title(),
        scripture_body(scripture.reference, text),
        scripture_data_payload(scripture.reference, date_str=date_str, version=version),
        dry_run=dry_run,
    )
