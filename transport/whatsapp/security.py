"""
Token Verification

SECURITY BOUNDARY - shared-secret checks for /qr, /send and /session/events.
No retries. No logic beyond comparison.
"""

import hmac
from typing import Optional

from .errors import AuthorizationError


def _matches(candidate: Optional[str], expected: str) -> bool:
    if candidate is None:
        return False
    # Compare (constant-time to prevent timing attacks)
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token:
        return None
    return token


def verify_bearer(authorization: Optional[str], expected_token: str) -> None:
    """
    Require 'Authorization: Bearer <expected_token>' when a token is configured.

    Raises:
        AuthorizationError: Header missing or token mismatch
    """
    if not expected_token:
        return
    if not _matches(bearer_token(authorization), expected_token):
        raise AuthorizationError()


def verify_qr_access(
    query_token: Optional[str],
    authorization: Optional[str],
    expected_token: str,
) -> None:
    """
    Allow /qr when either ?token= or the bearer header matches.

    Raises:
        AuthorizationError: Neither credential matches
    """
    if not expected_token:
        return
    if _matches(query_token, expected_token):
        return
    if _matches(bearer_token(authorization), expected_token):
        return
    raise AuthorizationError()
