"""WhatsApp gateway webhook.

Always answers 200 with {status, reason}: gateways retry on anything else,
and a retry would repeat the user-facing reply.
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from healthbot.domain.results import HandlingResult, HandlingState
from healthbot.domain.webhook_handler import WebhookHandler
from healthbot.observability.logging import get_logger

router = APIRouter(tags=["webhooks"])

logger = get_logger(__name__)


def _get_handler(request: Request) -> WebhookHandler:
    return request.app.state.webhook_handler


@router.post("/webhook")
@router.post("/webhooks/whatsapp")
async def whatsapp_webhook(request: Request) -> dict[str, str]:
    """Receive a WasenderAPI or Whapi message webhook."""
    try:
        payload: Any = await request.json()
    except Exception:
        logger.warning("invalid json body")
        return HandlingResult(
            state=HandlingState.IGNORED, status="ignored", reason="invalid json"
        ).to_response()

    handler = _get_handler(request)
    # Embedding, vector search, completion and the gateway send are blocking calls.
    result = await run_in_threadpool(handler.handle, payload)
    return result.to_response()
