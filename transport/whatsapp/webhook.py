"""
WhatsApp Webhook Receiver

FastAPI router for the Meta webhook:
- GET  /whatsapp/webhook  subscription challenge
- POST /whatsapp/webhook  statuses and inbound messages

Every status and message is recorded in the event log. Meta always
gets a 200 once the signature checks out: a 5xx would trigger
aggressive redelivery.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import PlainTextResponse

from config import Config

from .normalize import iter_change_values, message_record, status_record
from .routing import classify_message
from .schemas import WhatsAppWebhookPayload
from .security import SignatureVerificationError, verify_signature, verify_webhook_challenge
from .sender import WhatsAppSender

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/whatsapp", tags=["WhatsApp Transport"])


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("/webhook", response_class=PlainTextResponse)
async def whatsapp_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
) -> str:
    """
    Verify webhook subscription challenge from Meta.

    Raises:
        HTTPException(403): Invalid mode or token
    """
    challenge = verify_webhook_challenge(hub_mode, hub_challenge, hub_verify_token, Config.VERIFY_TOKEN)
    logger.info("Webhook verified")
    return challenge


# ============================================================================
# WEBHOOK RECEIVER (Event logging + replies)
# ============================================================================

@router.post("/webhook")
async def whatsapp_webhook_receiver(request: Request):
    """
    Receive WhatsApp statuses and messages.

    Flow:
    1. Verify signature (401 if invalid, when APP_SECRET is set)
    2. Ignore payloads that are not WhatsApp Business Account events
    3. Record each status
    4. Record each message and reply (sales hand-off or quick reply)

    Any failure after step 1 is recorded and acknowledged with 200.
    """
    events = request.app.state.event_log
    sender: WhatsAppSender = request.app.state.whatsapp_sender

    body = await request.body()

    try:
        verify_signature(body, request.headers.get("X-Hub-Signature-256"), Config.APP_SECRET)
    except SignatureVerificationError:
        logger.warning("Invalid X-Hub-Signature-256")
        events.enqueue("error", {"where": "verifySignature", "message": "invalid_signature"})
        return Response(status_code=401)

    try:
        payload = WhatsAppWebhookPayload.model_validate(json.loads(body or b"{}"))
        if not payload.is_whatsapp:
            return {"status": "ok"}

        for value in iter_change_values(payload.entry):
            for st in value.get("statuses") or []:
                if not isinstance(st, dict):
                    continue
                info = status_record(st)
                logger.info(f"STATUS: {info.get('status')} {info.get('message_id')}")
                events.enqueue("status", info)

            for msg in value.get("messages") or []:
                if not isinstance(msg, dict):
                    continue
                record = message_record(msg)
                logger.info(
                    "INCOMING message",
                    extra={"from": record.get("from"), "type": record.get("type"), "msg_id": record.get("msg_id")},
                )
                events.enqueue("message", record)

                if classify_message(msg) == "derivacion":
                    await sender.send_derivacion(msg.get("from"))
                else:
                    await sender.send_quick_reply_ventas(msg.get("from"))

    except Exception as e:
        logger.error(f"ERROR webhook: {e}", exc_info=True)
        events.enqueue("error", {"where": "webhook", "message": str(e)})

    # Always acknowledge
    return {"status": "ok"}
