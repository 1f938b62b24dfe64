"""
Gateway error taxonomy.

Each error maps to one HTTP status; routes translate them into responses.
"""

from typing import List, Optional


class GatewayError(Exception):
    """Base class for errors surfaced to HTTP callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(GatewayError):
    """Missing or mismatching token."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ValidationError(GatewayError):
    """Required request fields are missing."""

    status_code = 400

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class NotFoundError(GatewayError):
    """Unknown group, or no QR image yet."""

    status_code = 404


class DeliveryError(GatewayError):
    """Webhook POST or message send failed."""

    status_code = 500
