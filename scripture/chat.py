# scripture/chat.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scripture.exceptions import InvalidInput, UpstreamError
from scripture.genai import GenerativeClient
from scripture.speech import SpeechSynthesizer

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class ChatReply:
    reply_text: str
    audio: Optional[bytes] = None


class ChatRelay:
    """
    Pont sans état : un tour de conversation → Gemini (+ synthèse vocale optionnelle).
    L'historique, s'il en faut un, est porté par l'appelant.
    """

    def __init__(
        self,
        client: GenerativeClient,
        speech: Optional[SpeechSynthesizer] = None,
        *,
        default_theme: str = "Encouragement",
        church_name: str = "RCCG The Eagles Ark",
    ):
        self.client = client
        self.speech = speech
        self.default_theme = default_theme
        self.church_name = church_name

    def build_prompt(self, theme: str, reference: str, text: str, message: str) -> str:
        instruction = (
            f"You are a friendly and knowledgeable biblical assistant for the '{self.church_name}' church. "
            f"The theme is \"{theme or self.default_theme}\". "
            f"The scripture is {reference or ''} which reads: \"{text or ''}\". "
            "Respond to the user's message in a concise, uplifting, and conversational style. "
            "Keep responses appropriate for a church audience."
        )
        return f"{instruction}\nUser: {message}\nAssistant:"

    def respond(self, theme: str, reference: str, text: str, message: str) -> ChatReply:
        message = (message or "").strip()
        if not message:
            raise InvalidInput("Missing message in request body")

        prompt = self.build_prompt(theme, reference, text, message)
        reply = self.client.generate_text(prompt, temperature=CHAT_TEMPERATURE)
        if not reply:
            logger.warning("GenAI returned an empty chat reply (reference=%r)", reference)
            raise UpstreamError("Empty response from GenAI")

        audio = self.speech.synthesize(reply) if self.speech else None
        return ChatReply(reply_text=reply, audio=audio)
