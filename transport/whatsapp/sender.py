"""
Outbound Gateway

Sends webhook-originated messages into named groups.
No formatting. No retries. No rollback.

Text + media is two sequential sends (text first). If the media send fails
after the text went out, the caller still sees a failure.
"""

import logging
from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from session import Chat, MediaAttachment, SessionProvider

from .errors import DeliveryError, NotFoundError, ValidationError
from .schemas import OutboundRequest

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "file"
MISSING_FIELDS_MESSAGE = "Missing groupName or message/media"
GROUP_NOT_FOUND_MESSAGE = "Group not found in your account"


def parse_request(body: Any) -> OutboundRequest:
    """
    Validate a /send body.

    Raises:
        ValidationError: Body is not an object, or required fields are missing
    """
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", missing=["groupName"])

    try:
        request = OutboundRequest.model_validate(body)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ValidationError(f"Invalid fields: {', '.join(fields)}", missing=fields)

    missing: List[str] = []
    if not request.group_name:
        missing.append("groupName")
    if not request.message and request.media is None:
        missing.append("message/media")
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing=missing)

    if request.media is not None:
        media_missing = [
            f"media.{name}"
            for name in ("data", "mimetype")
            if not getattr(request.media, name)
        ]
        if media_missing:
            raise ValidationError(
                f"Missing media fields: {', '.join(media_missing)}",
                missing=media_missing,
            )

    return request


class OutboundGateway:
    """Resolves a group by display name and dispatches to it."""

    def __init__(self, provider: SessionProvider):
        self.provider = provider

    async def resolve_group(self, group_name: str) -> Chat:
        """
        Find a group by exact, case-sensitive display name.

        First match wins when names collide.

        Raises:
            NotFoundError: No group with that name
            DeliveryError: Chat listing failed
        """
        try:
            chats = await self.provider.get_chats()
        except Exception as e:
            logger.error(
                f"Error listing chats: {e}",
                exc_info=True,
                extra={"group_name": group_name},
            )
            raise DeliveryError(str(e))

        matches = [c for c in chats if c.is_group and c.name == group_name]
        if not matches:
            raise NotFoundError(GROUP_NOT_FOUND_MESSAGE)

        if len(matches) > 1:
            logger.warning(
                f"{len(matches)} groups named {group_name!r}; sending to the first",
                extra={"group_name": group_name, "chat_ids": [c.id for c in matches]},
            )
        return matches[0]

    async def send(self, request: OutboundRequest) -> Chat:
        """
        Deliver a validated request.

        Returns:
            The target chat

        Raises:
            NotFoundError: Unknown group
            DeliveryError: Any send failed (possibly after a partial delivery)
        """
        target = await self.resolve_group(request.group_name)

        try:
            if request.media is not None:
                media = MediaAttachment(
                    data=request.media.data,
                    mimetype=request.media.mimetype,
                    filename=request.media.filename or DEFAULT_FILENAME,
                )
                if request.message:
                    await self.provider.send_message(target.id, request.message)
                await self.provider.send_message(target.id, media)
            else:
                await self.provider.send_message(target.id, request.message)
        except Exception as e:
            logger.error(
                f"Error sending message: {e}",
                exc_info=True,
                extra={"chat_id": target.id, "group_name": request.group_name},
            )
            raise DeliveryError(str(e))

        logger.info(
            f"Sent message to group {request.group_name}",
            extra={
                "chat_id": target.id,
                "has_text": bool(request.message),
                "has_media": request.media is not None,
            }
        )
        return target
