"""Subscription verification handshake for Meta webhooks."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

SUBSCRIBE_MODE = "subscribe"


def resolve_challenge(
    mode: Optional[str],
    token: Optional[str],
    challenge: Optional[str],
    verify_token: Optional[str],
) -> Optional[str]:
    """
    Answer Meta's webhook verification request.

    Args:
        mode: The hub.mode query parameter
        token: The hub.verify_token query parameter
        challenge: The hub.challenge query parameter
        verify_token: The verify token configured for this deployment

    Returns:
        The challenge to echo back unmodified, or None if verification failed
    """
    if not verify_token:
        logger.error("WHATSAPP_VERIFY_TOKEN not configured, rejecting verification")
        return None

    if mode != SUBSCRIBE_MODE:
        logger.warning(f"Verification failed: invalid hub.mode {mode!r}")
        return None

    if token != verify_token:
        logger.warning("Verification failed: invalid verify token")
        return None

    logger.info("Webhook verified")
    return challenge if challenge is not None else ""
