"""
Group Relay Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the contract between the chat account and the automation webhook.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ============================================================================
# INBOUND MESSAGE PAYLOAD (THE CONTRACT)
# ============================================================================

class MediaPayload(BaseModel):
    """Attachment forwarded with an inbound message."""

    data: str = Field(..., description="Base64-encoded media content")
    mimetype: str = Field(..., description="MIME type, e.g. image/jpeg")
    filename: str = Field("file", description="Original filename or placeholder")

    model_config = ConfigDict(frozen=True)


class InboundMessagePayload(BaseModel):
    """
    Canonical payload posted to the webhook for each group message.

    The webhook never sees session internals, only this shape.
    """

    group: str = Field(..., description="Group display name, raw id as fallback")
    sender: str = Field(..., description="Author id, push name or origin id")
    text: str = Field("", description="Message body. Empty for media-only messages.")
    has_media: bool = Field(False, alias="hasMedia")
    media: Optional[MediaPayload] = Field(
        None,
        description="Present if and only if hasMedia is true"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> dict:
        """Wire form: camelCase keys, media omitted when absent."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================================
# OUTBOUND SEND REQUEST (INPUT)
# ============================================================================

class OutboundMedia(BaseModel):
    """Media object in a /send request."""

    data: Optional[str] = None
    mimetype: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("mimetype", "mimeType"),
    )
    filename: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class OutboundRequest(BaseModel):
    """
    Body of POST /send.

    Fields are optional here so that missing ones are reported together
    by the gateway as a 400, not as a framework 422.
    """

    group_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("groupName", "group_name"),
    )
    message: Optional[str] = None
    media: Optional[OutboundMedia] = None

    model_config = ConfigDict(extra="ignore")


class SendResponse(BaseModel):
    """Successful /send response."""

    success: bool = True
