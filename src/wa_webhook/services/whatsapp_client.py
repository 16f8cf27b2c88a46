import httpx
import logging
from typing import Optional

from wa_webhook.exceptions import ConfigurationMissing, OutboundDeliveryFailed
from wa_webhook.models import OutboundReply, OutboundTextMessage
from wa_webhook.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class WhatsAppClient:
    """Client for sending messages through the WhatsApp Cloud API."""

    def __init__(self, settings: Optional[Settings] = None):
        if settings is None:
            settings = get_settings()
        self.access_token = settings.whatsapp_token
        self.phone_number_id = settings.phone_number_id
        self.timeout = settings.outbound_timeout_seconds
        self.base_url = f"https://graph.facebook.com/{settings.graph_api_version}"

    def _require_credentials(self) -> None:
        if not self.access_token:
            raise ConfigurationMissing("WHATSAPP_TOKEN")
        if not self.phone_number_id:
            raise ConfigurationMissing("PHONE_NUMBER_ID")

    async def post_message(self, reply: OutboundReply) -> dict:
        """
        Post a text message to the Graph API messages endpoint.

        Args:
            reply: Recipient WhatsApp ID and text body

        Returns:
            dict: Response from WhatsApp API

        Raises:
            ConfigurationMissing: If the access token or phone number ID is not set
            OutboundDeliveryFailed: On network errors or non-2xx responses
        """
        self._require_credentials()

        url = f"{self.base_url}/{self.phone_number_id}/messages"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.access_token}"
        }
        payload = OutboundTextMessage.from_reply(reply).model_dump()

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, headers=headers, json=payload, timeout=self.timeout)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise OutboundDeliveryFailed(e.response.text, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise OutboundDeliveryFailed(str(e)) from e

        # A 2xx means the message was accepted, whatever the body format
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Graph API accepted message to {reply.to} with a non-JSON body")
            return {}

    async def send_text_message(self, to: str, body: str) -> bool:
        """
        Send a text message to a WhatsApp user, logging instead of raising on failure.

        Args:
            to: WhatsApp ID of the recipient (wa_id)
            body: Text message body

        Returns:
            bool: True if the Graph API accepted the message
        """
        try:
            await self.post_message(OutboundReply(to=to, text=body))
        except ConfigurationMissing as e:
            logger.error(f"Cannot send message: {e}")
            return False
        except OutboundDeliveryFailed as e:
            logger.error(f"Failed to send message to {to}: {e}")
            return False

        logger.info(f"Automated reply sent to {to}")
        return True
