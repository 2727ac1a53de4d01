"""Chat relay: forwards a user's message to the automation chatbot.

Unlike wizard notifications the caller waits for the reply. The reply
text is taken from whichever of the known keys the chatbot answered with.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from core.constants import CHAT_SOURCE, NotificationEvent
from core.exceptions import UnauthenticatedError, UpstreamError
from core.security import Actor
from notifications.channels import AutomationWebhookChannel, NotificationEnvelope

logger = logging.getLogger(__name__)

REPLY_KEYS = ("response", "message", "content", "reply", "text", "answer")
DEFAULT_REPLY = "Thank you for your message! I received it successfully."
FALLBACK_REPLY = "Message sent to chatbot successfully! (Response may take a moment to process)"


def extract_reply(body: str) -> str:
    """Pull the bot's answer out of a chatbot response body."""
    text = (body or "").strip()
    if not text:
        return DEFAULT_REPLY

    try:
        parsed = json.loads(text)
    except ValueError:
        return text

    if isinstance(parsed, dict):
        for key in REPLY_KEYS:
            value = parsed.get(key)
            if isinstance(value, str) and value:
                return value
    return text


class ChatService:
    def __init__(self, channel: AutomationWebhookChannel):
        self.channel = channel

    async def send(self, message: str, actor: Optional[Actor]) -> tuple[str, bool]:
        """Send ``message`` and return ``(reply, delivered_via_fallback)``.

        Raises:
            UnauthenticatedError: If no actor identity is present
            UpstreamError: If both the primary and fallback requests fail
        """
        if actor is None:
            raise UnauthenticatedError()

        now = datetime.now(timezone.utc).isoformat()
        envelope = NotificationEnvelope(
            event=NotificationEvent.CHAT_MESSAGE_SENT.value,
            payload_key="message",
            payload={
                "content": message,
                "timestamp": now,
                "userId": actor.id,
                "userEmail": actor.email,
            },
            user_id=actor.id,
            user_email=actor.email,
            source=CHAT_SOURCE,
            timestamp=now,
        )
        body = envelope.to_dict()

        try:
            response = await self.channel.post_primary(body)
            return extract_reply(response.text), False
        except httpx.HTTPError as e:
            logger.warning(f"Chat webhook failed, attempting fallback: {e}")

        try:
            await self.channel.post_fallback(body)
        except httpx.HTTPError as e:
            logger.error(f"Fallback chat webhook failed: {e}")
            raise UpstreamError("Failed to send message to chatbot")

        logger.info("Chat webhook sent via fallback")
        return FALLBACK_REPLY, True
