"""FastAPI application for the WhatsApp webhook receiver."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from wa_webhook.api.routes.health import router as health_router
from wa_webhook.api.routes.webhook import router as webhook_router
from wa_webhook.services.dispatcher import ReplyDispatcher
from wa_webhook.services.whatsapp_client import WhatsAppClient
from wa_webhook.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Webhook listener started")
    yield
    await app.state.dispatcher.drain()


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[WhatsAppClient] = None,
) -> FastAPI:
    """
    Build the application with its configuration and outbound client.

    Args:
        settings: Settings to use. If None, settings will be loaded from environment.
        client: WhatsApp client for replies. If None, one is built from settings.
    """
    if settings is None:
        settings = get_settings()
    if client is None:
        client = WhatsAppClient(settings)

    configure_logging(settings.log_level)

    app = FastAPI(
        title="WhatsApp Webhook",
        description="Receives WhatsApp Cloud API webhooks and sends automated replies",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.dispatcher = ReplyDispatcher(client)

    app.include_router(health_router)
    app.include_router(webhook_router)
    return app


def main() -> None:
    """Entry point for running the server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
