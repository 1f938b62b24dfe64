from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

SessionEventType = Literal[
    "qr",
    "authenticated",
    "ready",
    "auth_failure",
    "disconnected",
    "message",
]

GROUP_SUFFIX = "@g.us"


@dataclass(frozen=True)
class Chat:
    id: str
    name: Optional[str] = None
    is_group: bool = False


@dataclass(frozen=True)
class MediaAttachment:
    data: str                  # base64
    mimetype: str
    filename: Optional[str] = None


@dataclass(frozen=True)
class InboundMessage:
    id: str
    chat_id: str               # origin identifier ("from")
    body: str = ""
    has_media: bool = False
    author: Optional[str] = None       # participant id, groups only
    notify_name: Optional[str] = None  # push name
    timestamp: Optional[datetime] = None

    @property
    def is_group(self) -> bool:
        return self.chat_id.endswith(GROUP_SUFFIX)


@dataclass(frozen=True)
class SessionEvent:
    type: SessionEventType
    qr: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[InboundMessage] = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
