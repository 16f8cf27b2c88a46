import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import PlainTextResponse

from wa_webhook.exceptions import MalformedPayload, SignatureInvalid
from wa_webhook.extractor import extract_messages
from wa_webhook.handshake import resolve_challenge
from wa_webhook.security import SIGNATURE_HEADER, check_signature_header, verify_signature
from wa_webhook.services.dispatcher import build_reply

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_envelope(raw_body: bytes) -> Any:
    # ValueError covers JSONDecodeError, UnicodeDecodeError and oversized integers
    try:
        return json.loads(raw_body)
    except (ValueError, RecursionError) as e:
        raise MalformedPayload(f"Body is not valid JSON: {e}") from e


@router.get("/webhook")
async def verify_webhook(
    request: Request,
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
) -> Response:
    """Answer Meta's subscription verification request."""
    settings = request.app.state.settings
    result = resolve_challenge(mode, token, challenge, settings.whatsapp_verify_token)
    if result is None:
        return Response(status_code=403)
    return PlainTextResponse(result, status_code=200)


@router.post("/webhook")
async def receive_webhook(request: Request) -> Response:
    """
    Receive WhatsApp event notifications and reply to inbound text messages.

    The signature is verified against the raw body before anything is parsed.
    Replies are scheduled without being awaited, so Meta gets its 200 as soon
    as the delivery is authenticated.
    """
    settings = request.app.state.settings
    dispatcher = request.app.state.dispatcher
    signature_header = request.headers.get(SIGNATURE_HEADER)

    # A missing or malformed header is rejected before the configuration is consulted
    try:
        check_signature_header(signature_header)
    except SignatureInvalid as e:
        logger.warning(f"Signature verification failed: {e.reason}")
        return Response(status_code=401)

    if not settings.meta_app_secret:
        logger.error("META_APP_SECRET not configured, returning 500")
        return Response(status_code=500)

    raw_body = await request.body()
    if not verify_signature(raw_body, signature_header, settings.meta_app_secret):
        return Response(status_code=401)

    try:
        envelope = _parse_envelope(raw_body)
    except MalformedPayload as e:
        logger.warning(f"{e}, acknowledging without processing")
        return Response(status_code=200)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Incoming webhook: {json.dumps(envelope)}")

    dispatched = 0
    for message in extract_messages(envelope):
        logger.info(f"Received {message.text!r} from {message.from_}")
        dispatcher.dispatch(build_reply(message))
        dispatched += 1

    logger.info(f"Webhook processed, {dispatched} reply task(s) scheduled")
    return Response(status_code=200)
