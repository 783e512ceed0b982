# api/authentication.py
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from firebase_admin import auth as fb_auth
from rest_framework import authentication, exceptions, permissions

from scripture.exceptions import NotConfigured
from teatime.firebase import ensure_initialized

logger = logging.getLogger(__name__)

User = get_user_model()


class FirebaseAuthentication(authentication.BaseAuthentication):
    """
    Header: ``Authorization: Bearer <Firebase ID token>``
    request.user → utilisateur Django (créé à la première connexion)
    request.auth → claims décodés du token
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid Authorization header.")

        id_token = header[1].decode("utf-8", errors="ignore")
        try:
            decoded = fb_auth.verify_id_token(id_token, app=ensure_initialized())
        except NotConfigured:
            raise exceptions.AuthenticationFailed("Authentication is not configured.")
        except fb_auth.ExpiredIdTokenError:
            raise exceptions.AuthenticationFailed("ID token expired.")
        except (fb_auth.InvalidIdTokenError, ValueError):
            raise exceptions.AuthenticationFailed("Invalid ID token.")
        except fb_auth.CertificateFetchError:
            logger.exception("Unable to fetch Firebase certificates")
            raise exceptions.AuthenticationFailed("Unable to verify ID token.")

        uid = decoded.get("uid")
        if not uid:
            raise exceptions.AuthenticationFailed("Firebase UID missing.")
        return self._get_user(uid, decoded.get("email") or ""), decoded

    def _get_user(self, uid: str, email: str):
        user, created = User.objects.get_or_create(
            username=f"firebase:{uid}"[:150],
            defaults={"email": email, "is_active": True},
        )
        if not created and email and user.email != email:
            user.email = email
            user.save(update_fields=["email"])
        if not user.is_active:
            raise exceptions.AuthenticationFailed("User inactive.")
        return user

    def authenticate_header(self, request):
        return self.keyword


class IsThemeAdmin(permissions.BasePermission):
    """
    Lecture publique ; écriture réservée :
    - au staff Django,
    - aux tokens portant le custom claim ``admin``,
    - aux emails de SCRIPTURE_ADMIN_EMAILS (si la liste est vide : tout utilisateur authentifié).
    """

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.is_staff:
            return True

        claims = request.auth if isinstance(request.auth, dict) else {}
        if claims.get("admin") is True:
            return True

        allowed = getattr(settings, "SCRIPTURE_ADMIN_EMAILS", [])
        if not allowed:
            return True
        email = (claims.get("email") or user.email or "").lower()
        return email in allowed
