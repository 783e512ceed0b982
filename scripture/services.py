# scripture/services.py
"""
Construction explicite des composants à partir des settings.
Chaque appel (requête HTTP, tâche, commande) reçoit ses propres instances ;
les stores reçoivent leur client de persistance en paramètre.
"""
from __future__ import annotations

from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from django.conf import settings

from scripture.chat import ChatRelay
from scripture.genai import GenerativeClient
from scripture.generator import ScriptureGenerator
from scripture.resolver import DailyResolver
from scripture.speech import SpeechSynthesizer
from scripture.stores import (
    FirestoreScriptureArchive,
    FirestoreThemeStore,
    ModelScriptureArchive,
    ModelThemeStore,
    ScriptureArchive,
    ThemeStore,
)


def build_stores(client=None) -> Tuple[ThemeStore, ScriptureArchive]:
    backend = getattr(settings, "SCRIPTURE_STORE_BACKEND", "firestore")
    if backend == "database":
        return ModelThemeStore(), ModelScriptureArchive()
    if backend != "firestore":
        raise ValueError(f"Unknown SCRIPTURE_STORE_BACKEND: {backend!r}")

    if client is None:
        from teatime.firebase import firestore_client
        client = firestore_client()
    collection = settings.FIRESTORE_COLLECTION
    return (
        FirestoreThemeStore(client, collection),
        FirestoreScriptureArchive(client, collection, settings.SCRIPTURE_VERSION_CODES),
    )


def build_generative_client() -> GenerativeClient:
    return GenerativeClient(
        settings.GENAI_API_KEY,
        settings.GENAI_MODEL,
        base_url=settings.GENAI_BASE_URL,
        timeout=settings.GENAI_TIMEOUT,
    )


def build_speech_synthesizer() -> Optional[SpeechSynthesizer]:
    if not getattr(settings, "TTS_ENABLED", False):
        return None
    return SpeechSynthesizer(
        project_id=settings.GOOGLE_CLOUD_PROJECT,
        base_url=settings.TTS_BASE_URL,
        language_code=settings.TTS_LANGUAGE_CODE,
        voice_name=settings.TTS_VOICE_NAME,
        speaking_rate=settings.TTS_SPEAKING_RATE,
        timeout=settings.TTS_TIMEOUT,
    )


def build_generator(archive: ScriptureArchive, client: Optional[GenerativeClient] = None) -> ScriptureGenerator:
    return ScriptureGenerator(
        client or build_generative_client(),
        archive,
        version_codes=settings.SCRIPTURE_VERSION_CODES,
        temperature=settings.SCRIPTURE_TEMPERATURE,
        max_retries=settings.SCRIPTURE_MAX_RETRIES,
        church_name=settings.SCRIPTURE_CHURCH_NAME,
    )


def build_daily_resolver(
    themes: Optional[ThemeStore] = None,
    archive: Optional[ScriptureArchive] = None,
    client: Optional[GenerativeClient] = None,
) -> DailyResolver:
    if themes is None or archive is None:
        themes, archive = build_stores()
    return DailyResolver(
        themes,
        archive,
        build_generator(archive, client),
        tz=ZoneInfo(settings.SCRIPTURE_TIMEZONE),
        default_theme=settings.SCRIPTURE_DEFAULT_THEME,
    )


def build_chat_relay() -> ChatRelay:
    return ChatRelay(
        build_generative_client(),
        build_speech_synthesizer(),
        default_theme=settings.SCRIPTURE_DEFAULT_THEME,
        church_name=settings.SCRIPTURE_CHURCH_NAME,
    )
