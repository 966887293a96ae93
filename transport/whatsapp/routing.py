"""
Reply policy for inbound messages.

Decides whether a message is handed off to Sales or answered with
the quick-reply buttons.
"""

from typing import Any, Dict, Literal

from .normalize import text_body

ReplyAction = Literal["derivacion", "quick_reply"]

SALES_BUTTON_PAYLOADS = frozenset({"CONTACTAR_VENTAS", "ATENCION_HUMANA"})

SALES_KEYWORDS = ("ventas", "hablar con ventas", "humano", "asesor", "baja", "derivar")


def classify_message(message: Dict[str, Any]) -> ReplyAction:
    """Pick the reply for an inbound WhatsApp message."""
    button = message.get("button")
    if (
        message.get("type") == "button"
        and isinstance(button, dict)
        and button.get("payload") in SALES_BUTTON_PAYLOADS
    ):
        return "derivacion"

    text = str(text_body(message) or "").lower()
    if any(keyword in text for keyword in SALES_KEYWORDS):
        return "derivacion"

    return "quick_reply"
