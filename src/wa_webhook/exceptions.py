"""Error taxonomy for webhook ingestion and outbound replies."""

from typing import Optional


class WebhookError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationMissing(WebhookError):
    """A required setting (secret, token or phone number id) is not configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} not configured")


class SignatureInvalid(WebhookError):
    """The X-Hub-Signature-256 header did not authenticate the request body.

    The reason is kept for diagnostics only; callers collapse every reason
    into a single 401 response.
    """

    MISSING_HEADER = "missing_header"
    MALFORMED_HEADER = "malformed_header"
    MALFORMED_SIGNATURE = "malformed_signature"
    SIGNATURE_MISMATCH = "signature_mismatch"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid webhook signature: {reason}")


class MalformedPayload(WebhookError):
    """An authenticated body could not be interpreted as a webhook envelope."""


class OutboundDeliveryFailed(WebhookError):
    """Sending a message through the Graph API failed."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        if status_code is not None:
            super().__init__(f"Send failed: HTTP {status_code}: {detail}")
        else:
            super().__init__(f"Send failed: {detail}")
