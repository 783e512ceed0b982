# scripture/exceptions.py
from __future__ import annotations


class ScriptureError(Exception):
    """Racine de toutes les erreurs métier du verset du jour."""


class InvalidInput(ScriptureError):
    """Erreur de l'appelant (4xx), jamais retentée."""


class NotConfigured(ScriptureError):
    """Identifiants backend absents (clé Gemini, compte de service Firebase…)."""


class UpstreamError(ScriptureError):
    """Backend génératif indisponible ou réponse inexploitable."""


class UpstreamHTTPError(UpstreamError):
    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Upstream HTTP error {status}: {body[:200]}")


class StorageError(ScriptureError):
    """Erreur de la couche de persistance (Firestore ou base SQL)."""


class GenerationError(ScriptureError):
    pass


class InvalidResponseShape(GenerationError):
    pass


class DuplicateReference(GenerationError):
    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Reference already used this month: {reference}")


class GenerationFailed(GenerationError):
    def __init__(self, attempts: int, last_error: Exception | None = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Scripture generation failed after {attempts} attempt(s): {last_error!r}")
