"""Data models for inbound WhatsApp messages and outbound replies."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class InboundMessage(BaseModel):
    """A user message extracted from a webhook delivery.

    ``text`` is None when the message carries no text body (audio, image,
    reactions and so on).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")  # Sender's WhatsApp ID (wa_id)
    text: Optional[str] = None


class OutboundReply(BaseModel):
    """A text reply addressed to the sender of an inbound message."""

    model_config = ConfigDict(frozen=True)

    to: str
    text: str


class TextBody(BaseModel):
    body: str


class OutboundTextMessage(BaseModel):
    """Request body for the Graph API ``/{phone_number_id}/messages`` endpoint."""

    messaging_product: Literal["whatsapp"] = "whatsapp"
    recipient_type: Literal["individual"] = "individual"
    to: str
    type: Literal["text"] = "text"
    text: TextBody

    @classmethod
    def from_reply(cls, reply: OutboundReply) -> "OutboundTextMessage":
        return cls(to=reply.to, text=TextBody(body=reply.text))
