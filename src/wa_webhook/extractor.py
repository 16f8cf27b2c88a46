"""
Extraction of inbound user messages from WhatsApp webhook envelopes.

A delivery looks like::

    {
        "object": "whatsapp_business_account",
        "entry": [
            {"changes": [{"field": "messages", "value": {"messages": [...]}}]}
        ]
    }

Every level is optional as far as this module is concerned. Anything that
does not have the expected shape is skipped, so a single odd field never
fails the whole delivery.
"""

import logging
from typing import Any, Iterator, Optional

from wa_webhook.models import InboundMessage

logger = logging.getLogger(__name__)

BUSINESS_ACCOUNT_OBJECT = "whatsapp_business_account"
MESSAGES_FIELD = "messages"


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _text_body(message: dict) -> Optional[str]:
    body = _as_dict(message.get("text")).get("body")
    return body if isinstance(body, str) else None


def extract_messages(envelope: Any) -> Iterator[InboundMessage]:
    """
    Yield the inbound messages contained in a webhook envelope.

    Args:
        envelope: The parsed JSON body of a webhook delivery

    Yields:
        InboundMessage for every message with a sender, in delivery order
    """
    envelope = _as_dict(envelope)
    if envelope.get("object") != BUSINESS_ACCOUNT_OBJECT:
        logger.info(f"Ignoring webhook for object {envelope.get('object')!r}")
        return

    for entry in _as_list(envelope.get("entry")):
        for change in _as_list(_as_dict(entry).get("changes")):
            change = _as_dict(change)
            field = change.get("field")
            value = _as_dict(change.get("value"))

            if field != MESSAGES_FIELD:
                # Status updates and other fields are acknowledged but not handled
                logger.debug(f"Skipping change for field {field!r}")
                continue

            if value.get("statuses"):
                logger.debug(f"Skipping {len(_as_list(value.get('statuses')))} status update(s)")

            for message in _as_list(value.get("messages")):
                message = _as_dict(message)
                sender = message.get("from")
                if not isinstance(sender, str) or not sender:
                    logger.warning("Skipping message without a sender")
                    continue

                yield InboundMessage(from_=sender, text=_text_body(message))
