"""WhatsApp Transport Layer - Module Exports"""

from .normalize import iter_change_values, message_record, status_record
from .routing import SALES_BUTTON_PAYLOADS, SALES_KEYWORDS, ReplyAction, classify_message
from .schemas import MessageRecord, StatusRecord, WhatsAppWebhookPayload
from .security import SignatureVerificationError, verify_signature, verify_webhook_challenge
from .sender import WhatsAppSender, WhatsAppSenderError
from .webhook import router

__all__ = [
    # Schemas
    "WhatsAppWebhookPayload",
    "StatusRecord",
    "MessageRecord",
    # Normalization
    "iter_change_values",
    "status_record",
    "message_record",
    # Routing
    "ReplyAction",
    "SALES_BUTTON_PAYLOADS",
    "SALES_KEYWORDS",
    "classify_message",
    # Security
    "verify_signature",
    "verify_webhook_challenge",
    "SignatureVerificationError",
    # Sender
    "WhatsAppSender",
    "WhatsAppSenderError",
    # Router
    "router",
]
