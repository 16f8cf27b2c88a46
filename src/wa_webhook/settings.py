"""Settings for the WhatsApp webhook receiver."""

from functools import lru_cache
from typing import Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded once from environment variables.

    Credentials are optional so that a missing value can be reported at the
    point of use (500 on the inbound path, skipped send on the outbound path)
    instead of preventing the process from starting.
    """

    model_config = ConfigDict(env_file=".env", extra="ignore", frozen=True)

    # Meta webhook subscription
    whatsapp_verify_token: Optional[str] = None
    meta_app_secret: Optional[str] = None

    # Graph API credentials for outbound replies
    whatsapp_token: Optional[str] = None
    phone_number_id: Optional[str] = None  # Our business phone number ID (sender)
    graph_api_version: str = "v19.0"
    outbound_timeout_seconds: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
