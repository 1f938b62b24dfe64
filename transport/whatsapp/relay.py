"""
Inbound Relay

Forwards group messages to the configured webhook.
No retries. No queueing. At-most-once, best effort.
Every failure is logged and swallowed: the relay never takes the process down.
"""

import logging
from typing import Optional

import httpx

from session import InboundMessage, SessionProvider

from .errors import DeliveryError
from .normalize import build_payload, is_group_message
from .schemas import InboundMessagePayload

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_TIMEOUT_S = 10.0


class InboundRelay:
    """
    Group message → webhook forwarder.

    Without a webhook URL the payload is logged instead (degraded mode).
    """

    def __init__(
        self,
        provider: SessionProvider,
        webhook_url: str = "",
        timeout: float = DEFAULT_WEBHOOK_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider = provider
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    async def relay(self, message: InboundMessage) -> Optional[InboundMessagePayload]:
        """
        Handle one incoming message.

        Returns:
            The forwarded (or logged) payload, or None when the message
            was filtered out or processing failed
        """
        if not is_group_message(message):
            logger.debug(f"Ignoring non-group message from {message.chat_id}")
            return None

        try:
            payload = await build_payload(message, self.provider)

            if self.webhook_url:
                await self.deliver(payload)
                logger.info(
                    f"Forwarded incoming group message: {payload.group} {payload.sender}",
                    extra={
                        "group": payload.group,
                        "sender": payload.sender,
                        "message_id": message.id,
                        "has_media": payload.has_media,
                    }
                )
            else:
                logger.info(f"WEBHOOK_URL not set; incoming payload: {_loggable(payload)}")

            return payload

        except Exception as e:
            logger.error(
                f"Error processing message {message.id}: {e}",
                exc_info=True,
                extra={
                    "message_id": message.id,
                    "chat_id": message.chat_id,
                    "error": str(e),
                }
            )
            return None

    async def deliver(self, payload: InboundMessagePayload) -> None:
        """
        POST the payload to the webhook.

        Raises:
            DeliveryError: Timeout, connection failure or non-2xx response
        """
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload.to_json(),
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            raise DeliveryError(f"Webhook timed out after {self.timeout}s: {e}")
        except httpx.RequestError as e:
            raise DeliveryError(f"Webhook request failed: {e}")

        if not response.is_success:
            raise DeliveryError(
                f"Webhook returned {response.status_code}: {response.text[:200]}"
            )


def _loggable(payload: InboundMessagePayload) -> dict:
    """Payload for the log sink, with media bytes elided."""
    data = payload.to_json()
    if "media" in data:
        data["media"] = {**data["media"], "data": f"<{len(payload.media.data)} base64 chars>"}
    return data
