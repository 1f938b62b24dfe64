"""
Bridge Session Provider

Drives a browser-automation sidecar (the process that actually runs the
chat web client) over HTTP. Requests go out with httpx; the sidecar pushes
lifecycle and message events back to POST /session/events, which lands in
ingest().

No retries. Sidecar failures raise SessionProviderError.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from .base import MessageContent, SessionProvider, SessionProviderError
from .types import Chat, InboundMessage, MediaAttachment, SessionEvent

logger = logging.getLogger(__name__)

EVENT_TYPES = {"qr", "authenticated", "ready", "auth_failure", "disconnected", "message"}


class SessionEventError(ValueError):
    """Sidecar event could not be parsed."""
    pass


def message_from_dict(data: Dict[str, Any]) -> InboundMessage:
    """
    Convert a sidecar message object into InboundMessage.

    Expected shape (whatsapp-web style):
        {"id": "...", "from": "123@g.us", "body": "...", "hasMedia": false,
         "author": "456@c.us", "notifyName": "Ann", "timestamp": 1707500000}
    """
    try:
        message_id = str(data["id"])
        chat_id = str(data["from"])
    except (KeyError, TypeError) as e:
        raise SessionEventError(f"Message missing field: {e}")

    timestamp = data.get("timestamp")
    try:
        sent_at = datetime.fromtimestamp(int(timestamp)) if timestamp else None
    except (TypeError, ValueError, OverflowError, OSError):
        raise SessionEventError(f"Invalid timestamp: {timestamp!r}")

    return InboundMessage(
        id=message_id,
        chat_id=chat_id,
        body=data.get("body") or "",
        has_media=bool(data.get("hasMedia")),
        author=data.get("author") or None,
        notify_name=data.get("notifyName") or None,
        timestamp=sent_at,
    )


def event_from_dict(data: Dict[str, Any]) -> SessionEvent:
    """Convert a pushed sidecar event into SessionEvent."""
    if not isinstance(data, dict):
        raise SessionEventError("Event must be a JSON object")

    event_type = data.get("type")
    if event_type not in EVENT_TYPES:
        raise SessionEventError(f"Unsupported event type: {event_type}")

    if event_type == "qr":
        qr = data.get("qr")
        if not qr:
            raise SessionEventError("qr event missing 'qr'")
        return SessionEvent(type="qr", qr=str(qr))

    if event_type == "message":
        message = data.get("message")
        if not isinstance(message, dict):
            raise SessionEventError("message event missing 'message'")
        return SessionEvent(type="message", message=message_from_dict(message))

    return SessionEvent(type=event_type, reason=data.get("reason"))


class BridgeSessionProvider(SessionProvider):
    """
    Session provider backed by an HTTP sidecar.

    Sidecar API:
        POST /session/start           {"clientId", "dataPath"}
        GET  /chats                   -> [{"id", "name", "isGroup"}]
        GET  /chats/{id}              -> {"id", "name", "isGroup"}
        GET  /messages/{id}/media     -> {"data", "mimetype", "filename"}
        POST /chats/{id}/messages     {"text"} | {"media": {...}}
    """

    def __init__(
        self,
        base_url: str,
        session_dir: str,
        client_id: str = "railway-listener",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.session_dir = session_dir
        self.client_id = client_id
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.request(method, url, json=json, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error(
                f"Sidecar request failed: {method} {path}: {e}",
                extra={"url": url},
            )
            raise SessionProviderError(f"Sidecar unreachable: {e}")

        if response.status_code >= 400:
            logger.error(
                f"Sidecar returned {response.status_code} for {method} {path}",
                extra={"status_code": response.status_code, "error_body": response.text},
            )
            raise SessionProviderError(
                f"Sidecar returned {response.status_code}: {response.text}"
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"Sidecar returned invalid JSON for {method} {path}",
                extra={"error_body": response.text[:200]},
            )
            raise SessionProviderError(f"Sidecar returned invalid JSON: {e}")

    async def start(self) -> None:
        await self._request(
            "POST",
            "/session/start",
            json={"clientId": self.client_id, "dataPath": self.session_dir},
        )
        logger.info(f"Bridge session started at {self.base_url}")

    async def stop(self) -> None:
        await super().stop()
        try:
            await self._request("POST", "/session/stop")
        except SessionProviderError as e:
            logger.warning(f"Sidecar stop failed: {e}")

    async def ingest(self, data: Dict[str, Any]) -> SessionEvent:
        """Parse a pushed sidecar event and queue it."""
        event = event_from_dict(data)
        await self.emit(event)
        return event

    @staticmethod
    def _chat(data: Dict[str, Any]) -> Chat:
        try:
            chat_id = str(data["id"])
            return Chat(
                id=chat_id,
                name=data.get("name") or None,
                is_group=bool(data.get("isGroup", chat_id.endswith("@g.us"))),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise SessionProviderError(f"Malformed chat from sidecar: {e!r}")

    async def get_chat(self, chat_id: str) -> Chat:
        data = await self._request("GET", f"/chats/{chat_id}")
        return self._chat(data)

    async def get_chats(self) -> List[Chat]:
        data = await self._request("GET", "/chats")
        if data is None:
            return []
        if not isinstance(data, list):
            raise SessionProviderError("Sidecar chat listing is not a list")
        return [self._chat(item) for item in data]

    async def download_media(self, message: InboundMessage) -> MediaAttachment:
        data = await self._request("GET", f"/messages/{message.id}/media")
        if not isinstance(data, dict) or not data.get("data"):
            raise SessionProviderError(f"No media returned for message {message.id}")
        try:
            return MediaAttachment(
                data=str(data["data"]),
                mimetype=data.get("mimetype") or "application/octet-stream",
                filename=data.get("filename") or None,
            )
        except (KeyError, TypeError) as e:
            raise SessionProviderError(f"Malformed media from sidecar: {e!r}")

    async def send_message(self, chat_id: str, content: MessageContent) -> None:
        if isinstance(content, MediaAttachment):
            body: Dict[str, Any] = {
                "media": {
                    "data": content.data,
                    "mimetype": content.mimetype,
                    "filename": content.filename,
                }
            }
        else:
            body = {"text": content}
        await self._request("POST", f"/chats/{chat_id}/messages", json=body)
