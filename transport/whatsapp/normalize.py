"""
Inbound Message Normalization

Converts session InboundMessages into the canonical InboundMessagePayload.
- FILTER: group conversations only
- TEXT: body passed through as-is
- MEDIA: downloaded through the session provider, embedded as base64

The webhook never knows which session backend produced the message.
"""

from session import InboundMessage, SessionProvider

from .schemas import InboundMessagePayload, MediaPayload

DEFAULT_FILENAME = "file"


class NormalizationError(Exception):
    """Inbound message could not be normalized."""
    pass


def is_group_message(message: InboundMessage) -> bool:
    """True when the origin identifier denotes a group conversation."""
    return message.is_group


def resolve_sender(message: InboundMessage) -> str:
    """
    Sender identifier: group participant id, then push name, then origin id.
    """
    return message.author or message.notify_name or message.chat_id


async def build_payload(
    message: InboundMessage,
    provider: SessionProvider,
) -> InboundMessagePayload:
    """
    Build the webhook payload for a group message.

    Args:
        message: Group message from the session provider
        provider: Session provider used for chat and media lookups

    Returns:
        InboundMessagePayload ready to POST

    Raises:
        NormalizationError: Message is not from a group
        SessionProviderError: Chat lookup or media download failed
    """
    if not is_group_message(message):
        raise NormalizationError(f"Not a group message: {message.chat_id}")

    chat = await provider.get_chat(message.chat_id)

    media = None
    if message.has_media:
        attachment = await provider.download_media(message)
        media = MediaPayload(
            data=attachment.data,
            mimetype=attachment.mimetype,
            filename=attachment.filename or DEFAULT_FILENAME,
        )

    return InboundMessagePayload(
        group=chat.name or message.chat_id,
        sender=resolve_sender(message),
        text=message.body or "",
        has_media=message.has_media,
        media=media,
    )
