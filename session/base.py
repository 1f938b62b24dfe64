"""
Session Provider abstract interface.

Role: the chat-account session engine (QR login, session persistence,
chat lookup, message transport) seen from the relay.

Rules:
- Lifecycle and inbound messages are delivered as SessionEvents on a queue
- Exactly one consumer reads events()
- Every send_message() call is one delivery, never batched
- Failures raise SessionProviderError
"""

import asyncio
from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Union

from .types import Chat, InboundMessage, MediaAttachment, SessionEvent

MessageContent = Union[str, MediaAttachment]


class SessionProviderError(Exception):
    """Session provider operation failed."""
    pass


class SessionProvider(ABC):
    """
    Abstract session boundary.
    Relay and gateway code must depend ONLY on this interface.
    """

    def __init__(self) -> None:
        self._events: "asyncio.Queue[SessionEvent]" = asyncio.Queue()
        self._closed = False

    async def emit(self, event: SessionEvent) -> None:
        """Push an event to the consumer."""
        await self._events.put(event)

    async def events(self) -> AsyncIterator[SessionEvent]:
        """
        Yield events in arrival order until the provider is stopped.
        """
        while not self._closed:
            event = await self._events.get()
            yield event

    @property
    def pending_events(self) -> int:
        return self._events.qsize()

    @abstractmethod
    async def start(self) -> None:
        """Initialize the session (may emit qr/authenticated/ready)."""
        raise NotImplementedError

    async def stop(self) -> None:
        """Tear down the session."""
        self._closed = True

    @abstractmethod
    async def get_chat(self, chat_id: str) -> Chat:
        """Look up a single conversation by id."""
        raise NotImplementedError

    @abstractmethod
    async def get_chats(self) -> List[Chat]:
        """List all conversations known to the account."""
        raise NotImplementedError

    @abstractmethod
    async def download_media(self, message: InboundMessage) -> MediaAttachment:
        """Fetch the attachment of an inbound message."""
        raise NotImplementedError

    @abstractmethod
    async def send_message(self, chat_id: str, content: MessageContent) -> None:
        """
        Send text or a media object to a conversation.

        Args:
            chat_id: Target conversation id
            content: Message text or MediaAttachment
        """
        raise NotImplementedError
