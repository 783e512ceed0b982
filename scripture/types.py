# scripture/types.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional, Set

from scripture.exceptions import InvalidResponseShape

logger = logging.getLogger(__name__)

DEFAULT_VERSION_CODES = ("KJV", "NKJV", "NIV", "MSG", "NLT", "AMP")

# Longueur max d'une référence (colonnes DailyScripture.reference / expanded_reference)
MAX_REFERENCE_LENGTH = 120

MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def date_key(on_date: date) -> str:
    return on_date.isoformat()


def is_month_key(value: str) -> bool:
    return bool(_MONTH_KEY_RE.match(value or ""))


def normalize_reference(reference: str) -> str:
    # "John  3:16" == "john 3:16" pour l'anti-répétition
    return " ".join((reference or "").split()).casefold()


@dataclass(frozen=True)
class Scripture:
    reference: str
    versions: Dict[str, str]
    expanded_reference: Optional[str] = None
    expanded_versions: Optional[Dict[str, str]] = None

    def is_complete(self, version_codes: Iterable[str] = DEFAULT_VERSION_CODES) -> bool:
        """Référence non vide et un texte pour chaque code de version."""
        if not (self.reference or "").strip():
            return False
        return all(isinstance(self.versions.get(code), str) and self.versions[code].strip() for code in version_codes)

    @property
    def has_expanded(self) -> bool:
        return bool(self.expanded_reference and self.expanded_versions)

    def to_dict(self) -> Dict[str, Any]:
        """Forme stockée / exposée (clés camelCase attendues par le client web)."""
        data: Dict[str, Any] = {
            "reference": self.reference,
            "versions": dict(self.versions),
        }
        if self.expanded_reference:
            data["expandedReference"] = self.expanded_reference
        if self.expanded_versions:
            data["expandedVersions"] = dict(self.expanded_versions)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Scripture":
        """Relit une entrée persistée ; une forme inconnue donne une Scripture incomplète (voir is_complete)."""
        reference = data.get("reference")
        versions = data.get("versions")
        expanded_reference = data.get("expandedReference")
        expanded_versions = data.get("expandedVersions")
        return cls(
            reference=reference if isinstance(reference, str) else "",
            versions=dict(versions) if isinstance(versions, Mapping) else {},
            expanded_reference=expanded_reference if isinstance(expanded_reference, str) and expanded_reference else None,
            expanded_versions=dict(expanded_versions) if isinstance(expanded_versions, Mapping) and expanded_versions else None,
        )


def _covering_versions(raw: Any, version_codes: Iterable[str]) -> Optional[Dict[str, str]]:
    """
    Retourne {code: texte} restreint aux codes reconnus, ou None si un code manque
    (ou n'a pas de texte).
    """
    if not isinstance(raw, Mapping):
        return None
    out: Dict[str, str] = {}
    for code in version_codes:
        text = raw.get(code)
        if not isinstance(text, str) or not text.strip():
            return None
        out[code] = text.strip()
    return out


def parse_scripture(payload: Any, version_codes: Iterable[str] = DEFAULT_VERSION_CODES) -> Scripture:
    """
    Valide un payload décodé venant du générateur.
    - reference non vide + versions couvrant tous les codes, sinon InvalidResponseShape
    - le contexte élargi est optionnel : incomplet → ignoré (log), jamais fatal
    """
    codes = tuple(version_codes)
    if not isinstance(payload, Mapping):
        raise InvalidResponseShape("Scripture payload is not a JSON object")

    reference = payload.get("reference")
    if not isinstance(reference, str) or not reference.strip():
        raise InvalidResponseShape("Missing or empty 'reference'")
    if len(reference.strip()) > MAX_REFERENCE_LENGTH:
        raise InvalidResponseShape(f"'reference' longer than {MAX_REFERENCE_LENGTH} characters")

    versions = _covering_versions(payload.get("versions"), codes)
    if versions is None:
        raise InvalidResponseShape(f"'versions' must cover every version code: {', '.join(codes)}")

    expanded_reference = payload.get("expandedReference")
    expanded_versions = _covering_versions(payload.get("expandedVersions"), codes)
    if (
        not (isinstance(expanded_reference, str) and expanded_reference.strip())
        or len(expanded_reference.strip()) > MAX_REFERENCE_LENGTH
        or expanded_versions is None
    ):
        logger.warning(
            "Scripture %s generated without complete expanded context; keeping the main verse only.",
            reference.strip(),
        )
        expanded_reference, expanded_versions = None, None
    else:
        expanded_reference = expanded_reference.strip()

    return Scripture(
        reference=reference.strip(),
        versions=versions,
        expanded_reference=expanded_reference,
        expanded_versions=expanded_versions,
    )


def reference_set(references: Iterable[str]) -> Set[str]:
    return {normalize_reference(r) for r in references if r}
