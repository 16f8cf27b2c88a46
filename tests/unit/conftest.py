from unittest.mock import AsyncMock, MagicMock

import pytest

from payloads import APP_SECRET, VERIFY_TOKEN
from wa_webhook.services.whatsapp_client import WhatsAppClient
from wa_webhook.settings import Settings


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings, independent of the environment."""
    return Settings(
        _env_file=None,
        whatsapp_verify_token=VERIFY_TOKEN,
        meta_app_secret=APP_SECRET,
        whatsapp_token="test-access-token",
        phone_number_id="123456789",
    )


@pytest.fixture
def mock_whatsapp_client() -> MagicMock:
    """WhatsAppClient whose sends are recorded instead of hitting the Graph API."""
    client = MagicMock(spec=WhatsAppClient)
    client.send_text_message = AsyncMock(return_value=True)
    return client
