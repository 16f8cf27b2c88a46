"""
Verification of Meta's X-Hub-Signature-256 webhook header.

Meta signs every event notification with HMAC-SHA256 over the raw request
body, keyed by the app secret. The check must run against the bytes exactly
as received: parsing the JSON and re-serializing it changes the bytes and
invalidates the signature.
"""

import binascii
import hashlib
import hmac
import logging
from typing import Optional

from wa_webhook.exceptions import SignatureInvalid

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(raw_body: bytes, app_secret: str) -> str:
    """Return the hex-encoded HMAC-SHA256 of ``raw_body`` keyed by ``app_secret``."""
    return hmac.new(
        app_secret.encode("utf-8"),
        raw_body,
        hashlib.sha256,
    ).hexdigest()


def check_signature_header(signature_header: Optional[str]) -> str:
    """
    Check the shape of the X-Hub-Signature-256 header.

    Returns:
        The hex digest following the 'sha256=' prefix

    Raises:
        SignatureInvalid: If the header is missing or lacks the prefix
    """
    if not signature_header:
        raise SignatureInvalid(SignatureInvalid.MISSING_HEADER)

    if not signature_header.startswith(SIGNATURE_PREFIX):
        raise SignatureInvalid(SignatureInvalid.MALFORMED_HEADER)

    return signature_header[len(SIGNATURE_PREFIX):]


def check_signature(raw_body: bytes, signature_header: Optional[str], app_secret: str) -> None:
    """
    Check the X-Hub-Signature-256 header against the raw request body.

    Args:
        raw_body: The request body exactly as received
        signature_header: The header value, including the 'sha256=' prefix
        app_secret: The app secret used by Meta to sign the payload

    Raises:
        SignatureInvalid: With the reason the signature was rejected
    """
    received_hex = check_signature_header(signature_header)
    computed_hex = compute_signature(raw_body, app_secret)

    # unhexlify is strict: odd lengths, whitespace and non-hex characters all fail
    try:
        received = binascii.unhexlify(received_hex)
        computed = binascii.unhexlify(computed_hex)
    except (binascii.Error, ValueError):
        raise SignatureInvalid(SignatureInvalid.MALFORMED_SIGNATURE)

    if len(received) != len(computed):
        raise SignatureInvalid(SignatureInvalid.MALFORMED_SIGNATURE)

    # Constant-time comparison, never ==
    if not hmac.compare_digest(received, computed):
        raise SignatureInvalid(SignatureInvalid.SIGNATURE_MISMATCH)


def verify_signature(raw_body: bytes, signature_header: Optional[str], app_secret: str) -> bool:
    """
    Verify the X-Hub-Signature-256 header using HMAC SHA256.

    Returns:
        bool: True if signature is valid, False otherwise
    """
    try:
        check_signature(raw_body, signature_header, app_secret)
    except SignatureInvalid as e:
        logger.warning(f"Signature verification failed: {e.reason}")
        return False

    logger.debug("Signature verification passed")
    return True
