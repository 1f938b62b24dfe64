"""
Session boundary layer for the chat account.

This package isolates the session engine (QR login, persistence,
chat lookup, message transport) behind one async interface.

Supported providers:
- StubSessionProvider: Deterministic in-memory session (default for tests)
- BridgeSessionProvider: HTTP sidecar running the chat web client

Example usage:
    from session import StubSessionProvider, Chat

    provider = StubSessionProvider(chats=[Chat(id="1@g.us", name="Team", is_group=True)])
    await provider.start()
    async for event in provider.events():
        ...
"""

from .types import Chat, InboundMessage, MediaAttachment, SessionEvent, SessionEventType, GROUP_SUFFIX
from .base import MessageContent, SessionProvider, SessionProviderError
from .stub import StubSessionProvider, STUB_QR_CHALLENGE
from .bridge import BridgeSessionProvider, SessionEventError, event_from_dict, message_from_dict

__all__ = [
    "Chat",
    "InboundMessage",
    "MediaAttachment",
    "SessionEvent",
    "SessionEventType",
    "GROUP_SUFFIX",
    "MessageContent",
    "SessionProvider",
    "SessionProviderError",
    "StubSessionProvider",
    "STUB_QR_CHALLENGE",
    "BridgeSessionProvider",
    "SessionEventError",
    "event_from_dict",
    "message_from_dict",
]
