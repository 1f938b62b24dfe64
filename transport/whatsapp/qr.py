"""
QR Publisher

Turns login challenges into PNG images for GET /qr and prints them to the
operator log as terminal art.

Holds exactly one current image. A new challenge overwrites the old one;
nothing expires it otherwise.
"""

import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import qrcode

logger = logging.getLogger(__name__)


@dataclass
class QRStore:
    """Single slot for the last issued QR image (last writer wins)."""

    png: Optional[bytes] = None
    challenge: Optional[str] = None
    issued_at: Optional[datetime] = None

    @property
    def available(self) -> bool:
        return self.png is not None


def render_png(challenge: str) -> bytes:
    """Encode a challenge string as PNG bytes. Deterministic per input."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(challenge)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_terminal(challenge: str) -> str:
    """Encode a challenge string as compact ASCII art."""
    qr = qrcode.QRCode(border=1)
    qr.add_data(challenge)
    qr.make(fit=True)
    out = io.StringIO()
    qr.print_ascii(out=out, invert=True)
    return out.getvalue()


class QRPublisher:
    """Writes new challenges into the store."""

    def __init__(self, store: QRStore):
        self.store = store

    def publish(self, challenge: str) -> bool:
        """
        Encode and store a new login challenge.

        Returns:
            True if the slot was updated. On encoding failure the previous
            image is kept.
        """
        logger.info("QR RECEIVED - scan this with WhatsApp -> Linked devices -> Link a device")
        try:
            logger.info("\n" + render_terminal(challenge))
        except Exception as e:
            logger.warning(f"Failed to render terminal QR: {e}")

        try:
            png = render_png(challenge)
        except Exception as e:
            logger.error(f"Failed to create QR image: {e}", exc_info=True)
            return False

        self.store.png = png
        self.store.challenge = challenge
        self.store.issued_at = datetime.now(timezone.utc)
        return True
