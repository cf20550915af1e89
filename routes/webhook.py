"""LINE webhook receiver. Events are handled after the response is sent."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from pydantic import ValidationError

from link_summarizer.relay import SIGNATURE_HEADER, Relay, WebhookPayload, verify_signature
from link_summarizer.settings import AppSettings, get_settings

from .helpers import get_relay
from .schema import WebhookResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhook", response_model=WebhookResponse)
async def webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: AppSettings = Depends(get_settings),
    relay: Relay | None = Depends(get_relay),
):
    body = await request.body()
    if not verify_signature(body, request.headers.get(SIGNATURE_HEADER), settings.line_channel_secret):
        logger.warning("⚠️ Webhook signature mismatch")
        return WebhookResponse(ok=False)

    try:
        payload = WebhookPayload.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("⚠️ Malformed webhook payload: %s", exc.error_count())
        return WebhookResponse(ok=False)

    if relay is None:
        logger.warning("⚠️ Webhook received but the relay is not configured")
        return WebhookResponse(ok=False)

    background_tasks.add_task(relay.handle_events, payload.events)
    return WebhookResponse(ok=True)
