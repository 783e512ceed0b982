# scripture/generator.py
"""
Génération du verset du jour par le backend génératif.

Cycle d'une tentative :
  prompt (thème + références déjà utilisées ce mois) → appel Gemini
  → nettoyage (```json …```) → JSON → validation de forme → anti-répétition.

``generate`` enchaîne un nombre borné de tentatives avec le même ensemble
d'exclusions ; une nouvelle requête au backend peut donner un autre résultat.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence

from scripture.exceptions import (
    DuplicateReference,
    GenerationFailed,
    InvalidResponseShape,
    UpstreamError,
)
from scripture.genai import GenerativeClient
from scripture.stores import ScriptureArchive
from scripture.types import (
    DEFAULT_VERSION_CODES,
    Scripture,
    month_key,
    normalize_reference,
    parse_scripture,
    reference_set,
)

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")

RETRYABLE_ERRORS = (InvalidResponseShape, DuplicateReference, UpstreamError)


@dataclass(frozen=True)
class GenerationRequest:
    theme: str
    day: int
    year: int
    month: int
    excluded_references: Sequence[str] = field(default_factory=tuple)

    @property
    def month_key(self) -> str:
        return month_key(self.year, self.month)

    @property
    def excluded_set(self) -> FrozenSet[str]:
        return frozenset(reference_set(self.excluded_references))


def build_prompt(
    theme: str,
    day: int,
    excluded: Iterable[str] = (),
    version_codes: Sequence[str] = DEFAULT_VERSION_CODES,
    church_name: str = "RCCG The Eagles Ark",
) -> str:
    codes = ", ".join(version_codes)
    excluded = [r for r in excluded if r]

    prompt = (
        f"You are a biblical assistant for the '{church_name}' church. "
        f"The theme for this month is \"{theme}\".\n\n"
        "CRITICAL REQUIREMENTS:\n"
        f"1. The scripture MUST be highly relevant to the monthly theme: \"{theme}\"\n"
        "2. The scripture should provide spiritual insight, encouragement, or teaching related to this theme\n"
        f"3. Choose a powerful, meaningful verse that speaks directly to \"{theme}\"\n"
        f"4. Provide a single bible scripture for day {day} of the month."
    )

    if excluded:
        prompt += (
            "\n\nIMPORTANT: The following scriptures have ALREADY been used this month. "
            f"You MUST NOT reuse any of them; choose a DIFFERENT scripture that is still relevant "
            f"to the theme \"{theme}\":\n" + ", ".join(excluded)
        )

    prompt += (
        f"\n\nThe scripture you choose must clearly relate to the theme \"{theme}\".\n\n"
        "Return ONLY a JSON object with the following fields:\n"
        "- 'reference': the main verse (e.g., \"John 3:16\")\n"
        f"- 'versions': object with the main verse in {codes}\n"
        "- 'expandedReference': the expanded range including 2-3 verses before and after "
        "for context (e.g., \"John 3:14-18\")\n"
        f"- 'expandedVersions': object with the expanded passage in {codes}\n\n"
        "Do not add any commentary, explanation, or markdown formatting."
    )
    return prompt


def clean_response(text: str) -> str:
    """Retire les balises ```json``` et le commentaire autour de l'objet JSON."""
    cleaned = _FENCE_RE.sub("", (text or "").strip()).strip()
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start >= 0 and end > start:
        return cleaned[start:end + 1]
    return cleaned


class ScriptureGenerator:

    def __init__(
        self,
        client: GenerativeClient,
        archive: ScriptureArchive,
        *,
        version_codes: Sequence[str] = DEFAULT_VERSION_CODES,
        temperature: float = DEFAULT_TEMPERATURE,
        max_retries: int = 2,
        church_name: str = "RCCG The Eagles Ark",
    ):
        self.client = client
        self.archive = archive
        self.version_codes = tuple(version_codes)
        self.temperature = temperature
        self.max_retries = max(0, int(max_retries))
        self.church_name = church_name

    def excluded_references(self, year: int, month: int) -> List[str]:
        return self.archive.references_for_month(month_key(year, month))

    def attempt(self, request: GenerationRequest) -> Scripture:
        """Un cycle complet prompt → appel → validation → anti-répétition."""
        prompt = build_prompt(
            request.theme,
            request.day,
            request.excluded_references,
            self.version_codes,
            self.church_name,
        )
        text = self.client.generate_text(prompt, temperature=self.temperature)
        if not text:
            raise UpstreamError("Empty response from GenAI")

        try:
            payload = json.loads(clean_response(text))
        except ValueError as exc:
            raise InvalidResponseShape(f"Response is not valid JSON: {exc}") from exc

        scripture = parse_scripture(payload, self.version_codes)

        if normalize_reference(scripture.reference) in request.excluded_set:
            logger.warning("Generated duplicate scripture %s for %s", scripture.reference, request.month_key)
            raise DuplicateReference(scripture.reference)

        return scripture

    def generate(self, theme: str, day: int, year: int, month: int) -> Scripture:
        request = GenerationRequest(
            theme=theme,
            day=day,
            year=year,
            month=month,
            excluded_references=tuple(self.excluded_references(year, month)),
        )
        attempts = 1 + self.max_retries
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                scripture = self.attempt(request)
            except RETRYABLE_ERRORS as exc:
                last_error = exc
                logger.warning(
                    "Scripture generation attempt %s/%s for %s-%02d failed: %s",
                    attempt, attempts, request.month_key, day, exc,
                )
                continue
            logger.info(
                "Generated scripture %s for %s-%02d (theme=%r, attempt %s)",
                scripture.reference, request.month_key, day, theme, attempt,
            )
            return scripture

        logger.error("Scripture generation exhausted %s attempts for %s-%02d", attempts, request.month_key, day)
        raise GenerationFailed(attempts, last_error)
