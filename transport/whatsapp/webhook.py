"""
Group Relay HTTP Routes

FastAPI router exposing:
- GET  /qr              current login QR as PNG
- POST /send            send text/media into a named group
- POST /session/events  event ingress for the bridge sidecar

No session logic here. Pure translation between HTTP and the components.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from config import Config
from infra.bootstrap import InfraBootstrap, get_bootstrap
from session import BridgeSessionProvider, SessionEventError

from .errors import AuthorizationError, GatewayError, NotFoundError, ValidationError
from .security import verify_bearer, verify_qr_access
from .sender import parse_request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Group Relay"])


def _error_response(error: GatewayError) -> JSONResponse:
    content = {"error": error.message}
    if isinstance(error, ValidationError) and error.missing:
        content["missing"] = error.missing
    return JSONResponse(status_code=error.status_code, content=content)


# ============================================================================
# QR PUBLISHER
# ============================================================================

@router.get("/qr")
async def get_qr(
    token: Optional[str] = Query(None),
    authorization: Optional[str] = Header(None),
    infra: InfraBootstrap = Depends(get_bootstrap),
) -> Response:
    """
    Return the last issued login QR code.

    Returns:
        200 image/png

    Errors:
        401: QR_TOKEN set and neither ?token= nor bearer header matches
        404: No challenge issued yet
    """
    try:
        verify_qr_access(token, authorization, Config.QR_TOKEN)
        if not infra.qr_store.available:
            raise NotFoundError("QR not generated yet - check logs")
    except GatewayError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)

    return Response(content=infra.qr_store.png, media_type="image/png")


# ============================================================================
# OUTBOUND GATEWAY
# ============================================================================

@router.post("/send")
async def send_to_group(
    request: Request,
    authorization: Optional[str] = Header(None),
    infra: InfraBootstrap = Depends(get_bootstrap),
) -> JSONResponse:
    """
    Send a message and/or media into a group, by display name.

    Expected payload:
    {
        "groupName": "Team",
        "message": "hi",
        "media": {"data": "<base64>", "mimetype": "image/jpeg", "filename": "photo.jpg"}
    }

    Returns:
        {"success": true}

    Errors:
        400: Missing groupName, or both message and media
        401: SEND_TOKEN set and bearer token mismatch
        404: Group not found
        500: Send failed ({"error": "<message>"})
    """
    try:
        # Step 1: Authorize before touching the body
        verify_bearer(authorization, Config.SEND_TOKEN)

        # Step 2: Validate
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError(
                "Invalid JSON body",
                missing=["groupName", "message/media"],
            )
        send_request = parse_request(body)

        # Step 3: Resolve + dispatch
        await infra.gateway.send(send_request)

    except AuthorizationError as e:
        logger.warning("Rejected /send: bad token")
        return _error_response(e)
    except ValidationError as e:
        logger.info(f"Rejected /send: {e.message}", extra={"missing": e.missing})
        return _error_response(e)
    except GatewayError as e:
        return _error_response(e)

    return JSONResponse(content={"success": True})


# ============================================================================
# SESSION EVENT INGRESS (bridge sidecar)
# ============================================================================

@router.post("/session/events", status_code=status.HTTP_202_ACCEPTED)
async def session_events(
    request: Request,
    authorization: Optional[str] = Header(None),
    infra: InfraBootstrap = Depends(get_bootstrap),
) -> JSONResponse:
    """
    Receive a lifecycle or message event pushed by the bridge sidecar.

    Expected payloads:
        {"type": "qr", "qr": "<challenge>"}
        {"type": "authenticated"} / {"type": "ready"}
        {"type": "auth_failure", "reason": "..."}
        {"type": "message", "message": {"id", "from", "body", "hasMedia", ...}}
    """
    try:
        verify_bearer(authorization, Config.BRIDGE_TOKEN)
    except AuthorizationError as e:
        return _error_response(e)

    provider = infra.provider
    if not isinstance(provider, BridgeSessionProvider):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "Active session backend does not accept pushed events"},
        )

    try:
        data = await request.json()
        event = await provider.ingest(data)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid JSON body"},
        )
    except SessionEventError as e:
        logger.warning(f"Rejected session event: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )

    logger.debug(f"Session event queued: {event.type}")
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content={"status": "accepted"},
    )
