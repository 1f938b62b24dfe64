"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Config  # noqa: E402
from infra import InfraBootstrap, InfraConfig  # noqa: E402
from session import Chat, InboundMessage, MediaAttachment, StubSessionProvider  # noqa: E402

TEAM_GROUP_ID = "120363000000000001@g.us"
DIRECT_CHAT_ID = "15551234567@c.us"


@pytest.fixture(autouse=True)
def open_endpoints():
    """Tokens unset unless a test sets them."""
    with patch.object(Config, "SEND_TOKEN", ""), \
         patch.object(Config, "QR_TOKEN", ""), \
         patch.object(Config, "BRIDGE_TOKEN", ""):
        yield


@pytest.fixture
def team_chat():
    return Chat(id=TEAM_GROUP_ID, name="Team", is_group=True)


@pytest.fixture
def stub_provider(team_chat):
    return StubSessionProvider(
        chats=[
            team_chat,
            Chat(id=DIRECT_CHAT_ID, name="Alice", is_group=False),
        ],
        media={
            "msg_media": MediaAttachment(data="aGVsbG8=", mimetype="image/jpeg", filename="photo.jpg"),
            "msg_media_noname": MediaAttachment(data="aGVsbG8=", mimetype="application/pdf"),
        },
    )


@pytest.fixture
def infra_config(tmp_path):
    return InfraConfig(
        session_backend="stub",
        session_dir=str(tmp_path / "session"),
        session_client_id="test-client",
        bridge_url="http://bridge.test",
        bridge_timeout_s=5.0,
        webhook_url="",
        webhook_timeout_s=10.0,
    )


@pytest.fixture
def infra(infra_config, stub_provider):
    """Bootstrap wired to the stub provider, installed as the process singleton."""
    InfraBootstrap.reset()
    bootstrap = InfraBootstrap(infra_config, provider=stub_provider)
    InfraBootstrap._instance = bootstrap
    yield bootstrap
    InfraBootstrap.reset()


@pytest.fixture
def client(infra):
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)


def _group_message(**overrides) -> InboundMessage:
    fields = {
        "id": "msg_1",
        "chat_id": TEAM_GROUP_ID,
        "body": "hello team",
        "has_media": False,
        "author": "15550001111@c.us",
        "notify_name": "Bob",
    }
    fields.update(overrides)
    return InboundMessage(**fields)


def _direct_message(**overrides) -> InboundMessage:
    fields = {
        "id": "msg_dm",
        "chat_id": DIRECT_CHAT_ID,
        "body": "just you and me",
    }
    fields.update(overrides)
    return InboundMessage(**fields)


@pytest.fixture
def group_message():
    """Factory for group messages from the Team group."""
    return _group_message


@pytest.fixture
def direct_message():
    """Factory for one-to-one messages."""
    return _direct_message
