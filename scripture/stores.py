# scripture/stores.py
"""
Thèmes mensuels et archive des versets du jour.

Deux backends derrière les mêmes contrats :
- Firestore : documents ``meta/themes`` ({"YYYY-MM": thème}) et
  ``meta/dailyScripture`` ({"YYYY-MM-DD": Scripture}), écritures en merge.
- ORM Django : modèles ``MonthlyTheme`` / ``DailyScripture``.

Toute erreur de la couche de persistance remonte en ``StorageError``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from functools import wraps
from typing import Dict, List, Optional

from django.db import DatabaseError, transaction
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from scripture.exceptions import StorageError
from scripture.models import DailyScripture, MonthlyTheme
from scripture.types import DEFAULT_VERSION_CODES, Scripture

logger = logging.getLogger(__name__)

THEMES_DOC_ID = "themes"
SCRIPTURE_DOC_ID = "dailyScripture"


def _storage_errors(*error_types):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except error_types as exc:
                raise StorageError(f"{func.__qualname__} failed: {exc}") from exc
        return wrapper
    return decorator


_firestore_errors = _storage_errors(google_exceptions.GoogleAPIError)
_db_errors = _storage_errors(DatabaseError)


# -----------------------------
# Contrats
# -----------------------------

class ThemeStore(ABC):

    @abstractmethod
    def get(self, month_key: str) -> Optional[str]:
        ...

    @abstractmethod
    def all(self) -> Dict[str, str]:
        ...

    @abstractmethod
    def set(self, month_key: str, text: str) -> None:
        """Écrase le thème du mois ; un texte vide supprime l'entrée."""


class ScriptureArchive(ABC):

    @abstractmethod
    def get(self, date_key: str) -> Optional[Scripture]:
        ...

    @abstractmethod
    def entries_for_month(self, month_key: str) -> Dict[str, Scripture]:
        ...

    def references_for_month(self, month_key: str) -> List[str]:
        entries = self.entries_for_month(month_key)
        return [entries[k].reference for k in sorted(entries) if entries[k].reference]

    @abstractmethod
    def save(self, date_key: str, scripture: Scripture) -> None:
        """Écriture en merge : n'efface jamais les autres dates."""

    @abstractmethod
    def save_if_absent(self, date_key: str, scripture: Scripture) -> Scripture:
        """Crée l'entrée si la date est libre ; retourne la valeur effectivement stockée."""

    @abstractmethod
    def delete(self, date_key: str) -> bool:
        ...


# -----------------------------
# Firestore
# -----------------------------

class FirestoreThemeStore(ThemeStore):

    def __init__(self, client, collection: str = "meta"):
        self._doc = client.collection(collection).document(THEMES_DOC_ID)

    @_firestore_errors
    def all(self) -> Dict[str, str]:
        snap = self._doc.get()
        if not snap.exists:
            return {}
        return {k: v for k, v in (snap.to_dict() or {}).items() if isinstance(v, str) and v}

    def get(self, month_key: str) -> Optional[str]:
        return self.all().get(month_key)

    @_firestore_errors
    def set(self, month_key: str, text: str) -> None:
        text = (text or "").strip()
        value = text if text else firestore.DELETE_FIELD
        self._doc.set({month_key: value}, merge=True)


class FirestoreScriptureArchive(ScriptureArchive):

    def __init__(self, client, collection: str = "meta", version_codes=DEFAULT_VERSION_CODES):
        self._client = client
        self._doc = client.collection(collection).document(SCRIPTURE_DOC_ID)
        self.version_codes = tuple(version_codes)

    def _data(self, snap) -> Dict[str, dict]:
        if not snap.exists:
            return {}
        return snap.to_dict() or {}

    def _entry(self, date_key: str, raw) -> Optional[Scripture]:
        """Entrée exploitable ou None (champ absent, ou forme héritée {title, passages…})."""
        if not raw:
            return None
        scripture = Scripture.from_dict(raw) if isinstance(raw, dict) else None
        if scripture is None or not scripture.is_complete(self.version_codes):
            logger.warning("Ignoring malformed daily scripture entry for %s in Firestore", date_key)
            return None
        return scripture

    @_firestore_errors
    def get(self, date_key: str) -> Optional[Scripture]:
        return self._entry(date_key, self._data(self._doc.get()).get(date_key))

    @_firestore_errors
    def entries_for_month(self, month_key: str) -> Dict[str, Scripture]:
        data = self._data(self._doc.get())
        prefix = f"{month_key}-"
        entries = {k: self._entry(k, v) for k, v in data.items() if k.startswith(prefix)}
        return {k: v for k, v in entries.items() if v is not None}

    @_firestore_errors
    def save(self, date_key: str, scripture: Scripture) -> None:
        self._doc.set({date_key: scripture.to_dict()}, merge=True)

    @_firestore_errors
    def save_if_absent(self, date_key: str, scripture: Scripture) -> Scripture:
        doc = self._doc

        @firestore.transactional
        def _create(txn):
            raw = self._data(doc.get(transaction=txn)).get(date_key)
            existing = self._entry(date_key, raw)
            if existing:
                return existing
            if raw:
                # entrée malformée : remplacée en entier (un set merge fusionnerait les anciens champs)
                txn.update(doc, {date_key: scripture.to_dict()})
            else:
                txn.set(doc, {date_key: scripture.to_dict()}, merge=True)
            return scripture

        return _create(self._client.transaction())

    @_firestore_errors
    def delete(self, date_key: str) -> bool:
        if date_key not in self._data(self._doc.get()):
            return False
        self._doc.set({date_key: firestore.DELETE_FIELD}, merge=True)
        return True


# -----------------------------
# ORM Django
# -----------------------------

def _parse_date_key(date_key: str) -> date:
    return date.fromisoformat(date_key)


def _to_scripture(obj: DailyScripture) -> Scripture:
    return Scripture(
        reference=obj.reference,
        versions=dict(obj.versions or {}),
        expanded_reference=obj.expanded_reference or None,
        expanded_versions=dict(obj.expanded_versions) if obj.expanded_versions else None,
    )


def _model_fields(scripture: Scripture) -> dict:
    return {
        "reference": scripture.reference,
        "versions": dict(scripture.versions),
        "expanded_reference": scripture.expanded_reference or "",
        "expanded_versions": dict(scripture.expanded_versions) if scripture.expanded_versions else None,
    }


class ModelThemeStore(ThemeStore):

    @_db_errors
    def get(self, month_key: str) -> Optional[str]:
        return (MonthlyTheme.objects
                .filter(month_key=month_key)
                .values_list("text", flat=True)
                .first())

    @_db_errors
    def all(self) -> Dict[str, str]:
        return dict(MonthlyTheme.objects.order_by("month_key").values_list("month_key", "text"))

    @_db_errors
    def set(self, month_key: str, text: str) -> None:
        text = (text or "").strip()
        if not text:
            MonthlyTheme.objects.filter(month_key=month_key).delete()
            return
        MonthlyTheme.objects.update_or_create(month_key=month_key, defaults={"text": text})


class ModelScriptureArchive(ScriptureArchive):

    @_db_errors
    def get(self, date_key: str) -> Optional[Scripture]:
        obj = DailyScripture.objects.filter(date=_parse_date_key(date_key)).first()
        return _to_scripture(obj) if obj else None

    @_db_errors
    def entries_for_month(self, month_key: str) -> Dict[str, Scripture]:
        year, month = (int(p) for p in month_key.split("-"))
        qs = DailyScripture.objects.filter(date__year=year, date__month=month).order_by("date")
        return {obj.date.isoformat(): _to_scripture(obj) for obj in qs}

    @_db_errors
    def save(self, date_key: str, scripture: Scripture) -> None:
        DailyScripture.objects.update_or_create(
            date=_parse_date_key(date_key),
            defaults=_model_fields(scripture),
        )

    @_db_errors
    def save_if_absent(self, date_key: str, scripture: Scripture) -> Scripture:
        with transaction.atomic():
            obj, created = DailyScripture.objects.get_or_create(
                date=_parse_date_key(date_key),
                defaults=_model_fields(scripture),
            )
        if not created:
            logger.info("Daily scripture for %s already stored (%s); keeping it.", date_key, obj.reference)
        return _to_scripture(obj)

    @_db_errors
    def delete(self, date_key: str) -> bool:
        deleted, _ = DailyScripture.objects.filter(date=_parse_date_key(date_key)).delete()
        return deleted > 0
