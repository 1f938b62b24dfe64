"""
Infrastructure configuration system.

Environment-based session backend selection with sensible defaults.
"""

import os
from typing import Literal
from dataclasses import dataclass

from config import Config
from session import SessionProvider, StubSessionProvider, BridgeSessionProvider


SessionBackendType = Literal["stub", "bridge"]


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Session
    session_backend: SessionBackendType
    session_dir: str
    session_client_id: str
    bridge_url: str
    bridge_timeout_s: float

    # Relay
    webhook_url: str
    webhook_timeout_s: float

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults target production: the bridge sidecar on localhost.
        """
        return cls(
            # Session Configuration
            session_backend=os.getenv("SESSION_BACKEND", "bridge"),  # type: ignore
            session_dir=Config.SESSION_DIR,
            session_client_id=Config.SESSION_CLIENT_ID,
            bridge_url=os.getenv("BRIDGE_URL", "http://localhost:8081"),
            bridge_timeout_s=float(os.getenv("BRIDGE_TIMEOUT_S", "30")),

            # Relay Configuration
            webhook_url=Config.WEBHOOK_URL,
            webhook_timeout_s=Config.WEBHOOK_TIMEOUT_S,
        )

    def create_session_provider(self) -> SessionProvider:
        """Create session provider instance based on configuration."""
        if self.session_backend == "stub":
            return StubSessionProvider()
        elif self.session_backend == "bridge":
            return BridgeSessionProvider(
                base_url=self.bridge_url,
                session_dir=self.session_dir,
                client_id=self.session_client_id,
                timeout=self.bridge_timeout_s,
            )
        else:
            # Default to bridge
            return BridgeSessionProvider(
                base_url=self.bridge_url,
                session_dir=self.session_dir,
                client_id=self.session_client_id,
                timeout=self.bridge_timeout_s,
            )


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
