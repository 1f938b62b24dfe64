"""
Inbound Relay Tests

Webhook delivery: filter, timeout, failure isolation, degraded mode.

KEY ASSERTION: a failed delivery never stops the next message
"""

import json
import logging
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from session import SessionProvider
from transport.whatsapp.errors import DeliveryError
from transport.whatsapp.normalize import build_payload
from transport.whatsapp.relay import InboundRelay

WEBHOOK_URL = "http://n8n.test/webhook/group-messages"


def recording_transport(calls, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status_code, json={"ok": True})
    return httpx.MockTransport(handler)


class TestRelayFilter:
    """Non-group messages produce nothing."""

    @pytest.mark.asyncio
    async def test_direct_message_not_forwarded(self, direct_message):
        calls = []
        provider = MagicMock(spec=SessionProvider)
        provider.get_chat = AsyncMock()
        provider.download_media = AsyncMock()
        relay = InboundRelay(provider, WEBHOOK_URL, transport=recording_transport(calls))

        result = await relay.relay(direct_message())

        assert result is None
        assert calls == []
        provider.get_chat.assert_not_called()
        provider.download_media.assert_not_called()

    @pytest.mark.asyncio
    async def test_direct_message_not_logged_as_error(self, direct_message, stub_provider, caplog):
        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=recording_transport([]))

        with caplog.at_level(logging.DEBUG):
            await relay.relay(direct_message())

        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


class TestRelayDelivery:
    """Group messages are POSTed as JSON."""

    @pytest.mark.asyncio
    async def test_group_message_posted(self, group_message, stub_provider):
        calls = []
        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=recording_transport(calls))

        payload = await relay.relay(group_message())

        assert payload is not None
        assert len(calls) == 1
        request = calls[0]
        assert request.method == "POST"
        assert str(request.url) == WEBHOOK_URL
        assert json.loads(request.content) == {
            "group": "Team",
            "sender": "15550001111@c.us",
            "text": "hello team",
            "hasMedia": False,
        }

    @pytest.mark.asyncio
    async def test_media_message_posted_with_media(self, group_message, stub_provider):
        calls = []
        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=recording_transport(calls))

        await relay.relay(group_message(id="msg_media", has_media=True))

        body = json.loads(calls[0].content)
        assert body["hasMedia"] is True
        assert body["media"]["mimetype"] == "image/jpeg"

    @pytest.mark.asyncio
    async def test_default_timeout_is_ten_seconds(self, stub_provider):
        relay = InboundRelay(stub_provider, WEBHOOK_URL)
        assert relay.timeout == 10.0

    @pytest.mark.asyncio
    async def test_request_carries_ten_second_timeout(self, group_message, stub_provider):
        timeouts = []

        def handler(request: httpx.Request) -> httpx.Response:
            timeouts.append(request.extensions["timeout"])
            return httpx.Response(200)

        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=httpx.MockTransport(handler))
        await relay.relay(group_message())

        assert len(timeouts) == 1
        assert timeouts[0] == {"connect": 10.0, "read": 10.0, "write": 10.0, "pool": 10.0}

    @pytest.mark.asyncio
    async def test_no_webhook_logs_payload(self, group_message, stub_provider, caplog):
        relay = InboundRelay(stub_provider, webhook_url="")

        with caplog.at_level(logging.INFO, logger="transport.whatsapp.relay"):
            payload = await relay.relay(group_message())

        assert payload is not None
        assert any("WEBHOOK_URL not set" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_logged_payload_elides_media(self, group_message, stub_provider, caplog):
        relay = InboundRelay(stub_provider, webhook_url="")

        with caplog.at_level(logging.INFO, logger="transport.whatsapp.relay"):
            await relay.relay(group_message(id="msg_media", has_media=True))

        text = " ".join(r.getMessage() for r in caplog.records)
        assert "aGVsbG8=" not in text
        assert "base64 chars" in text


class TestRelayFailures:
    """Failures are logged and swallowed."""

    @pytest.mark.asyncio
    async def test_timeout_swallowed_and_next_message_processed(self, group_message, stub_provider):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200)

        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=httpx.MockTransport(handler))

        first = await relay.relay(group_message(id="m1"))
        second = await relay.relay(group_message(id="m2", body="second"))

        assert first is None
        assert second is not None
        assert second.text == "second"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_timeout_raises_delivery_error_from_deliver(self, group_message, stub_provider):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=httpx.MockTransport(handler))
        payload = await build_payload(group_message(), stub_provider)

        with pytest.raises(DeliveryError):
            await relay.deliver(payload)

    @pytest.mark.asyncio
    async def test_non_2xx_is_failure(self, group_message, stub_provider, caplog):
        relay = InboundRelay(
            stub_provider,
            WEBHOOK_URL,
            transport=recording_transport([], status_code=502),
        )

        with caplog.at_level(logging.ERROR, logger="transport.whatsapp.relay"):
            result = await relay.relay(group_message())

        assert result is None
        assert any("502" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_chat_lookup_failure_swallowed(self, group_message, stub_provider):
        calls = []
        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=recording_transport(calls))

        result = await relay.relay(group_message(chat_id="unknown@g.us"))

        assert result is None
        assert calls == []

    @pytest.mark.asyncio
    async def test_media_failure_swallowed(self, group_message, stub_provider):
        calls = []
        relay = InboundRelay(stub_provider, WEBHOOK_URL, transport=recording_transport(calls))

        result = await relay.relay(group_message(id="no-such-media", has_media=True))

        assert result is None
        assert calls == []
