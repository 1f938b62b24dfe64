"""
Session Event Dispatcher

Single consumer of the session provider's event stream.
- qr            → QR publisher
- message       → inbound relay, one task per message
- lifecycle     → log + status; no automatic re-authentication
"""

import asyncio
import logging
from typing import Literal, Optional, Set

from session import SessionEvent, SessionProvider

from .qr import QRPublisher
from .relay import InboundRelay

logger = logging.getLogger(__name__)

SessionStatus = Literal[
    "starting",
    "qr",
    "authenticated",
    "ready",
    "auth_failure",
    "disconnected",
]


class EventDispatcher:
    """Routes session events to the QR publisher and the relay."""

    def __init__(
        self,
        provider: SessionProvider,
        qr_publisher: QRPublisher,
        relay: InboundRelay,
    ):
        self.provider = provider
        self.qr_publisher = qr_publisher
        self.relay = relay
        self.status: SessionStatus = "starting"
        self._tasks: Set[asyncio.Task] = set()
        self._runner: Optional[asyncio.Task] = None

    async def dispatch(self, event: SessionEvent) -> None:
        """Handle one event. Never raises."""
        try:
            if event.type == "qr":
                self.status = "qr"
                self.qr_publisher.publish(event.qr or "")
            elif event.type == "authenticated":
                self.status = "authenticated"
                logger.info("Authenticated - session saved")
            elif event.type == "ready":
                self.status = "ready"
                logger.info("WhatsApp client ready ✅")
            elif event.type == "auth_failure":
                self.status = "auth_failure"
                logger.error(f"Auth failure: {event.reason}")
            elif event.type == "disconnected":
                self.status = "disconnected"
                logger.warning(f"Session disconnected: {event.reason}")
            elif event.type == "message" and event.message is not None:
                task = asyncio.create_task(self.relay.relay(event.message))
                self._tasks.add(task)
                task.add_done_callback(self._on_relay_done)
            else:
                logger.debug(f"Ignoring session event: {event.type}")
        except Exception as e:
            logger.error(f"Error handling session event {event.type}: {e}", exc_info=True)

    def _on_relay_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Relay task failed: {error}", exc_info=error)

    async def run(self) -> None:
        """Consume events until cancelled."""
        async for event in self.provider.events():
            await self.dispatch(event)

    def start(self) -> asyncio.Task:
        """Run the consumer loop in the background."""
        if self._runner is None or self._runner.done():
            self._runner = asyncio.create_task(self.run())
        return self._runner

    async def drain(self) -> None:
        """Wait for all in-flight relays."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel the consumer loop and finish in-flight relays."""
        if self._runner is not None:
            self._runner.cancel()
            try:
                await self._runner
            except asyncio.CancelledError:
                pass
            self._runner = None
        await self.drain()
