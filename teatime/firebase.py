# teatime/firebase.py
from __future__ import annotations

import base64
import json
import logging
import os
from typing import Optional

import firebase_admin
from django.conf import settings
from firebase_admin import credentials, firestore
from google.auth import exceptions as google_auth_exceptions

from scripture.exceptions import NotConfigured

logger = logging.getLogger(__name__)

# JSON illisible, fichier absent, ADC introuvable…
CREDENTIAL_ERRORS = (ValueError, OSError, google_auth_exceptions.GoogleAuthError)


def _build_credential() -> Optional[credentials.Base]:
    path = getattr(settings, "FIREBASE_SERVICE_ACCOUNT_PATH", None)
    if path:
        return credentials.Certificate(path)

    raw = getattr(settings, "FIREBASE_SERVICE_ACCOUNT_JSON", None) or os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")
    if raw and raw.strip():
        raw = raw.strip()
        # base64 d'abord, puis JSON brut
        try:
            data = json.loads(base64.b64decode(raw, validate=True).decode("utf-8"))
        except ValueError:
            data = json.loads(raw)
        if not isinstance(data, dict) or data.get("type") != "service_account" or "private_key" not in data:
            raise NotConfigured("FIREBASE_SERVICE_ACCOUNT_JSON is not a service_account key.")
        return credentials.Certificate(data)

    if os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or getattr(settings, "USE_GOOGLE_APPLICATION_DEFAULT", False):
        return credentials.ApplicationDefault()

    return None


def ensure_initialized() -> firebase_admin.App:
    """
    Initialise **l'app par défaut** (sans name=) exactement une fois.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass  # pas d'app par défaut

    try:
        cred = _build_credential()
    except CREDENTIAL_ERRORS as exc:
        logger.error("Invalid Firebase credentials: %s", exc)
        raise NotConfigured(f"Invalid Firebase credentials: {exc}") from exc
    if cred is None:
        logger.error("Firebase is not configured; Firestore, auth and FCM are unavailable.")
        raise NotConfigured(
            "Firebase not configured. Provide one of: "
            "FIREBASE_SERVICE_ACCOUNT_PATH, FIREBASE_SERVICE_ACCOUNT_JSON (raw JSON or base64), "
            "or GOOGLE_APPLICATION_CREDENTIALS / USE_GOOGLE_APPLICATION_DEFAULT."
        )
    options = {"projectId": settings.FIREBASE_PROJECT_ID} if getattr(settings, "FIREBASE_PROJECT_ID", "") else None
    try:
        return firebase_admin.initialize_app(cred, options)
    except CREDENTIAL_ERRORS as exc:
        logger.error("Firebase initialisation failed: %s", exc)
        raise NotConfigured(f"Firebase initialisation failed: {exc}") from exc


def is_configured() -> bool:
    try:
        ensure_initialized()
        return True
    except NotConfigured:
        return False


def firestore_client():
    """Client Firestore explicite, à injecter dans les stores."""
    app = ensure_initialized()
    try:
        return firestore.client(app)
    except CREDENTIAL_ERRORS as exc:
        logger.error("Unable to create the Firestore client: %s", exc)
        raise NotConfigured(f"Unable to create the Firestore client: {exc}") from exc
