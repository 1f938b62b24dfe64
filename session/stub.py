"""
Stub session provider for testing and offline development.

Deterministic, in-memory, and never touches the network.
"""

from typing import Dict, List, Optional, Tuple

from .base import MessageContent, SessionProvider, SessionProviderError
from .types import Chat, InboundMessage, MediaAttachment, SessionEvent

STUB_QR_CHALLENGE = "stub-qr-challenge"


class StubSessionProvider(SessionProvider):
    """
    Deterministic fake session for tests and CI.

    start() emits a fixed QR challenge, then authenticated and ready.
    Sent messages are recorded in `sent` as (chat_id, content) tuples.
    """

    def __init__(
        self,
        chats: Optional[List[Chat]] = None,
        media: Optional[Dict[str, MediaAttachment]] = None,
        emit_login: bool = True,
    ) -> None:
        super().__init__()
        self.chats: List[Chat] = list(chats or [])
        self.media: Dict[str, MediaAttachment] = dict(media or {})
        self.sent: List[Tuple[str, MessageContent]] = []
        self.started = False
        self._emit_login = emit_login

    async def start(self) -> None:
        self.started = True
        if self._emit_login:
            await self.emit(SessionEvent(type="qr", qr=STUB_QR_CHALLENGE))
            await self.emit(SessionEvent(type="authenticated"))
            await self.emit(SessionEvent(type="ready"))

    async def get_chat(self, chat_id: str) -> Chat:
        for chat in self.chats:
            if chat.id == chat_id:
                return chat
        raise SessionProviderError(f"Unknown chat: {chat_id}")

    async def get_chats(self) -> List[Chat]:
        return list(self.chats)

    async def download_media(self, message: InboundMessage) -> MediaAttachment:
        try:
            return self.media[message.id]
        except KeyError:
            raise SessionProviderError(f"No media for message {message.id}")

    async def send_message(self, chat_id: str, content: MessageContent) -> None:
        self.sent.append((chat_id, content))

    async def receive(self, message: InboundMessage) -> None:
        """Simulate an incoming message."""
        await self.emit(SessionEvent(type="message", message=message))
