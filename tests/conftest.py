import json
from typing import Dict, Optional

import pytest

from scripture.generator import ScriptureGenerator
from scripture.stores import ScriptureArchive, ThemeStore
from scripture.types import DEFAULT_VERSION_CODES, Scripture


def versions_for(reference: str, codes=DEFAULT_VERSION_CODES) -> Dict[str, str]:
    return {code: f"{reference} ({code})" for code in codes}


def make_scripture(reference: str, expanded: Optional[str] = None) -> Scripture:
    return Scripture(
        reference=reference,
        versions=versions_for(reference),
        expanded_reference=expanded,
        expanded_versions=versions_for(expanded) if expanded else None,
    )


def scripture_reply(reference: str, expanded: Optional[str] = "", fenced: bool = False) -> str:
    """Réponse brute telle que renvoyée par Gemini."""
    payload = {"reference": reference, "versions": versions_for(reference)}
    if expanded is not None:
        expanded = expanded or f"{reference}-context"
        payload["expandedReference"] = expanded
        payload["expandedVersions"] = versions_for(expanded)
    text = json.dumps(payload)
    return f"```json\n{text}\n```" if fenced else text


class FakeGenerativeClient:
    """Renvoie les réponses en file ; une exception en file est levée."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []
        self.temperatures = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate_text(self, prompt, temperature=0.7):
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        if not self.responses:
            raise AssertionError("Unexpected GenAI call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeSpeech:

    def __init__(self, audio: Optional[bytes] = b"ID3-mp3"):
        self.audio = audio
        self.texts = []

    def synthesize(self, text):
        self.texts.append(text)
        return self.audio


class InMemoryThemeStore(ThemeStore):

    def __init__(self, themes=None):
        self.themes = dict(themes or {})

    def get(self, month_key):
        return self.themes.get(month_key)

    def all(self):
        return dict(self.themes)

    def set(self, month_key, text):
        text = (text or "").strip()
        if text:
            self.themes[month_key] = text
        else:
            self.themes.pop(month_key, None)


class InMemoryArchive(ScriptureArchive):

    def __init__(self, entries=None):
        self.entries = dict(entries or {})

    def get(self, date_key):
        return self.entries.get(date_key)

    def entries_for_month(self, month_key):
        return {k: v for k, v in self.entries.items() if k.startswith(f"{month_key}-")}

    def save(self, date_key, scripture):
        self.entries[date_key] = scripture

    def save_if_absent(self, date_key, scripture):
        return self.entries.setdefault(date_key, scripture)

    def delete(self, date_key):
        return self.entries.pop(date_key, None) is not None


@pytest.fixture
def themes():
    return InMemoryThemeStore()


@pytest.fixture
def archive():
    return InMemoryArchive()


@pytest.fixture
def make_generator():
    def _make(client, archive, **kwargs):
        kwargs.setdefault("max_retries", 2)
        return ScriptureGenerator(client, archive, **kwargs)
    return _make
