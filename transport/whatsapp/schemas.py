"""
WhatsApp Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the webhook envelope and the records written to the event log.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


WHATSAPP_OBJECT = "whatsapp_business_account"


# ============================================================================
# WHATSAPP WEBHOOK PAYLOAD SCHEMAS (INPUT)
# ============================================================================

class WhatsAppWebhookPayload(BaseModel):
    """
    Full WhatsApp webhook payload.

    ref: https://developers.facebook.com/docs/whatsapp/cloud-api/webhooks/payload-example
    """

    object: Optional[str] = Field(None, description="Always 'whatsapp_business_account'")
    entry: Any = Field(None, description="Webhook entries")

    class Config:
        extra = "allow"  # WhatsApp may add fields

    @property
    def is_whatsapp(self) -> bool:
        return self.object == WHATSAPP_OBJECT and isinstance(self.entry, list)


# ============================================================================
# EVENT LOG RECORDS (OUTPUT)
# ============================================================================

class StatusRecord(BaseModel):
    """Payload of a `status` event. Missing fields are omitted, values pass through as sent."""

    status: Optional[Any] = None  # sent, delivered, read, failed
    message_id: Optional[Any] = None
    recipient_id: Optional[Any] = None
    timestamp: Optional[Any] = None
    conversation: Optional[Any] = None
    pricing: Optional[Any] = None
    errors: Optional[Any] = None


class MessageRecord(BaseModel):
    """Payload of a `message` event. Content fields are explicit nulls when absent."""

    from_: Optional[Any] = Field(None, alias="from")
    type: Optional[Any] = None
    msg_id: Optional[Any] = None
    text: Optional[Any] = None
    button: Optional[Any] = None
    interactive: Optional[Any] = None
    image: Optional[Any] = None
    document: Optional[Any] = None
    timestamp: Optional[Any] = None

    class Config:
        populate_by_name = True
