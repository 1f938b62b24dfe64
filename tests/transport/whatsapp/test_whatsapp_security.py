"""
Token Verification Tests

Bearer and query-token checks.
"""

import pytest

from transport.whatsapp.errors import AuthorizationError
from transport.whatsapp.security import bearer_token, verify_bearer, verify_qr_access


class TestBearerParsing:

    def test_bearer(self):
        assert bearer_token("Bearer abc") == "abc"

    def test_other_scheme(self):
        assert bearer_token("Basic abc") is None

    def test_missing(self):
        assert bearer_token(None) is None
        assert bearer_token("") is None
        assert bearer_token("Bearer") is None


class TestVerifyBearer:

    def test_open_when_unset(self):
        verify_bearer(None, "")

    def test_match(self):
        verify_bearer("Bearer s3cret", "s3cret")

    def test_mismatch(self):
        with pytest.raises(AuthorizationError):
            verify_bearer("Bearer other", "s3cret")

    def test_missing_header(self):
        with pytest.raises(AuthorizationError):
            verify_bearer(None, "s3cret")


class TestVerifyQRAccess:

    def test_open_when_unset(self):
        verify_qr_access(None, None, "")

    def test_query_token(self):
        verify_qr_access("s3cret", None, "s3cret")

    def test_header_token(self):
        verify_qr_access(None, "Bearer s3cret", "s3cret")

    def test_wrong_query_right_header(self):
        verify_qr_access("wrong", "Bearer s3cret", "s3cret")

    def test_neither(self):
        with pytest.raises(AuthorizationError):
            verify_qr_access("wrong", "Bearer wrong", "s3cret")
