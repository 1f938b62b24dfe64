"""Group Relay Transport Layer - Module Exports"""

from .errors import (
    AuthorizationError,
    DeliveryError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from .normalize import (
    NormalizationError,
    build_payload,
    is_group_message,
    resolve_sender,
)
from .schemas import (
    InboundMessagePayload,
    MediaPayload,
    OutboundMedia,
    OutboundRequest,
    SendResponse,
)
from .security import bearer_token, verify_bearer, verify_qr_access
from .qr import QRPublisher, QRStore, render_png, render_terminal
from .relay import InboundRelay
from .sender import OutboundGateway, parse_request
from .dispatcher import EventDispatcher, SessionStatus

__all__ = [
    # Errors
    "GatewayError",
    "AuthorizationError",
    "ValidationError",
    "NotFoundError",
    "DeliveryError",
    # Schemas
    "InboundMessagePayload",
    "MediaPayload",
    "OutboundMedia",
    "OutboundRequest",
    "SendResponse",
    # Normalization
    "build_payload",
    "is_group_message",
    "resolve_sender",
    "NormalizationError",
    # Security
    "bearer_token",
    "verify_bearer",
    "verify_qr_access",
    # QR
    "QRPublisher",
    "QRStore",
    "render_png",
    "render_terminal",
    # Relay / Gateway
    "InboundRelay",
    "OutboundGateway",
    "parse_request",
    "EventDispatcher",
    "SessionStatus",
]
