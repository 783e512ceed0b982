from __future__ import annotations

import base64
import logging

from django.conf import settings
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from drf_yasg.views import get_schema_view
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from api.authentication import IsThemeAdmin
from api.serializers import (
    ChatRequestSerializer,
    ChatResponseSerializer,
    ScriptureSerializer,
    ThemeSerializer,
)
from scripture.exceptions import InvalidInput, ScriptureError
from scripture.services import build_chat_relay, build_daily_resolver, build_stores
from scripture.types import is_month_key

logger = logging.getLogger(__name__)

SCRIPTURE_ERROR_MESSAGE = "Unable to load today's scripture right now. Please try again shortly."
CHAT_ERROR_MESSAGE = "An error occurred while generating a response."


class _BadMonth(Exception):
    pass


schema_view = get_schema_view(
    openapi.Info(
        title="Tea Time with the Word API",
        default_version='v1',
        description="Daily scripture, monthly themes and scripture chat",
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
)


class TodayScriptureView(APIView):
    """
    GET /api/scripture/today/
    Archive d'abord ; génération à la demande si le jour n'est pas encore en cache.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(responses={200: ScriptureSerializer})
    def get(self, request):
        try:
            scripture = build_daily_resolver().resolve_today()
        except ScriptureError:
            logger.exception("Error in today's scripture endpoint")
            return Response({"error": SCRIPTURE_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        resp = Response(scripture.to_dict())
        resp["Cache-Control"] = "no-cache"
        return resp


class ChatView(APIView):
    """
    POST /api/chat/  body: {theme, scripture: {reference, text}, message}
    → {reply, audio?}  (audio : MP3 base64, absent si la synthèse échoue)
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "chat"

    @swagger_auto_schema(request_body=ChatRequestSerializer, responses={200: ChatResponseSerializer})
    def post(self, request):
        ser = ChatRequestSerializer(data=request.data)
        if not ser.is_valid():
            return Response({"error": "Invalid request body", "fields": ser.errors},
                            status=status.HTTP_400_BAD_REQUEST)
        data = ser.validated_data
        scripture = data.get("scripture") or {}

        try:
            reply = build_chat_relay().respond(
                data.get("theme", ""),
                scripture.get("reference", ""),
                scripture.get("text", ""),
                data.get("message", ""),
            )
        except InvalidInput as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except ScriptureError:
            logger.exception("Error in chat endpoint")
            return Response({"error": CHAT_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        body = {"reply": reply.reply_text}
        if reply.audio:
            body["audio"] = base64.b64encode(reply.audio).decode("ascii")
        return Response(body)


class ThemeListView(APIView):
    """GET /api/themes/ → {"YYYY-MM": thème}"""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        try:
            themes, _ = build_stores()
            return Response(themes.all())
        except ScriptureError:
            logger.exception("Error listing themes")
            return Response({"error": "Unable to load themes."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class ThemeDetailView(APIView):
    """
    GET    /api/themes/<YYYY-MM>/ → {month, theme, isDefault}
    PUT    /api/themes/<YYYY-MM>/ body {theme} (admin ; vide = suppression)
    DELETE /api/themes/<YYYY-MM>/ (admin)
    """
    permission_classes = [IsThemeAdmin]

    def _payload(self, month, text):
        return {
            "month": month,
            "theme": text or settings.SCRIPTURE_DEFAULT_THEME,
            "isDefault": not text,
        }

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        if not is_month_key(kwargs.get("month", "")):
            raise _BadMonth()

    def handle_exception(self, exc):
        if isinstance(exc, _BadMonth):
            return Response({"error": "Month must be formatted as YYYY-MM."}, status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, ScriptureError):
            logger.exception("Theme store error")
            return Response({"error": "Unable to access themes."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return super().handle_exception(exc)

    def get(self, request, month):
        themes, _ = build_stores()
        return Response(self._payload(month, themes.get(month)))

    @swagger_auto_schema(request_body=ThemeSerializer)
    def put(self, request, month):
        ser = ThemeSerializer(data=request.data)
        if not ser.is_valid():
            return Response({"error": "Invalid request body", "fields": ser.errors},
                            status=status.HTTP_400_BAD_REQUEST)
        text = ser.validated_data["theme"]
        themes, _ = build_stores()
        themes.set(month, text)
        logger.info("Theme for %s set to %r by %s", month, text, request.user)
        return Response(self._payload(month, text or None))

    def delete(self, request, month):
        themes, _ = build_stores()
        themes.set(month, "")
        logger.info("Theme for %s removed by %s", month, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
