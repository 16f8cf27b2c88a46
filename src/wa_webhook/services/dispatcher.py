"""Composition and fire-and-forget dispatch of automated replies."""

import asyncio
import logging
from typing import List, Set

from wa_webhook.models import InboundMessage, OutboundReply
from wa_webhook.services.whatsapp_client import WhatsAppClient

logger = logging.getLogger(__name__)

NO_TEXT_BODY = "No Text Body"


def build_reply(message: InboundMessage) -> OutboundReply:
    """Compose the automated reply for an inbound message."""
    incoming_text = message.text or NO_TEXT_BODY
    return OutboundReply(
        to=message.from_,
        text=f'Hello! I see you sent: "{incoming_text}". I am your automated bot. Thanks for texting!',
    )


class ReplyDispatcher:
    """
    Schedules outbound replies as independent tasks.

    dispatch() returns as soon as the send is scheduled. The webhook response
    never waits for a send; tasks run to completion or failure on their own.
    """

    def __init__(self, client: WhatsAppClient):
        self.client = client
        # Strong references so the event loop does not garbage collect running sends
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, reply: OutboundReply) -> asyncio.Task:
        task = asyncio.create_task(self.client.send_text_message(reply.to, reply.text))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        logger.debug(f"Scheduled reply to {reply.to}")
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Reply task failed: {task.exception()}")

    async def drain(self) -> List[object]:
        """Wait for in-flight sends to finish, e.g. on shutdown."""
        if not self._tasks:
            return []
        logger.info(f"Waiting for {len(self._tasks)} in-flight replies")
        return await asyncio.gather(*list(self._tasks), return_exceptions=True)
