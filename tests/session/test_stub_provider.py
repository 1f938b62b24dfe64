"""
Stub session provider tests.

Verifies deterministic behavior relied on by the relay tests.
"""

import pytest

from session import (
    Chat,
    SessionProviderError,
    StubSessionProvider,
    STUB_QR_CHALLENGE,
)


class TestStubSessionProvider:

    @pytest.mark.asyncio
    async def test_start_emits_login_sequence(self):
        provider = StubSessionProvider()

        await provider.start()

        events = []
        async for event in provider.events():
            events.append(event)
            if len(events) == 3:
                break

        assert [e.type for e in events] == ["qr", "authenticated", "ready"]
        assert events[0].qr == STUB_QR_CHALLENGE

    @pytest.mark.asyncio
    async def test_start_without_login(self):
        provider = StubSessionProvider(emit_login=False)

        await provider.start()

        assert provider.started is True
        assert provider.pending_events == 0

    @pytest.mark.asyncio
    async def test_get_chat(self, stub_provider, team_chat):
        assert await stub_provider.get_chat(team_chat.id) == team_chat

    @pytest.mark.asyncio
    async def test_unknown_chat_raises(self, stub_provider):
        with pytest.raises(SessionProviderError):
            await stub_provider.get_chat("nope@g.us")

    @pytest.mark.asyncio
    async def test_send_recorded(self, stub_provider):
        await stub_provider.send_message("1@g.us", "hi")

        assert stub_provider.sent == [("1@g.us", "hi")]

    @pytest.mark.asyncio
    async def test_receive_queues_message(self, stub_provider, group_message):
        message = group_message()

        await stub_provider.receive(message)

        async for event in stub_provider.events():
            assert event.type == "message"
            assert event.message == message
            break

    @pytest.mark.asyncio
    async def test_get_chats_is_a_copy(self):
        provider = StubSessionProvider(chats=[Chat(id="1@g.us", name="A", is_group=True)])

        chats = await provider.get_chats()
        chats.clear()

        assert len(await provider.get_chats()) == 1
