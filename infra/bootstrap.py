"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the session provider and the components
that share it (QR store, relay, gateway, dispatcher).
"""

import logging
from pathlib import Path
from typing import Optional

from session import SessionProvider, SessionProviderError
from transport.whatsapp.dispatcher import EventDispatcher
from transport.whatsapp.qr import QRPublisher, QRStore
from transport.whatsapp.relay import InboundRelay
from transport.whatsapp.sender import OutboundGateway

from .config import InfraConfig, get_config

logger = logging.getLogger(__name__)


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(
        self,
        config: Optional[InfraConfig] = None,
        provider: Optional[SessionProvider] = None,
    ):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.provider = provider or self.config.create_session_provider()
        self.qr_store = QRStore()
        self.qr_publisher = QRPublisher(self.qr_store)
        self.relay = InboundRelay(
            self.provider,
            webhook_url=self.config.webhook_url,
            timeout=self.config.webhook_timeout_s,
        )
        self.gateway = OutboundGateway(self.provider)
        self.dispatcher = EventDispatcher(self.provider, self.qr_publisher, self.relay)

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def ensure_session_dir(self) -> Path:
        """Create the session storage directory if absent."""
        path = Path(self.config.session_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    async def startup(self) -> None:
        """Prepare storage, start consuming events, then start the session."""
        self.ensure_session_dir()
        self.dispatcher.start()
        try:
            await self.provider.start()
        except SessionProviderError as e:
            # Operator action needed; the HTTP surface stays up
            logger.error(f"Session provider failed to start: {e}", exc_info=True)

    async def shutdown(self) -> None:
        await self.dispatcher.stop()
        await self.provider.stop()

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(session={self.config.session_backend}, "
            f"webhook={'set' if self.config.webhook_url else 'unset'}, "
            f"session_dir={self.config.session_dir})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with all backends initialized
    """
    return InfraBootstrap.get_instance(config)


def get_bootstrap() -> InfraBootstrap:
    """FastAPI dependency returning the process bootstrap."""
    return InfraBootstrap.get_instance()
