"""
WhatsApp Input Normalization

PURE CONVERSION - NO I/O

Walks the webhook envelope and converts statuses and messages into
the payloads recorded in the event log.
"""

from typing import Any, Dict, Iterator, Optional

from .schemas import MessageRecord, StatusRecord


def iter_change_values(entries: list) -> Iterator[Dict[str, Any]]:
    """Yield every `entry[].changes[].value` object."""
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        for change in entry.get("changes") or []:
            if not isinstance(change, dict):
                continue
            value = change.get("value")
            if isinstance(value, dict):
                yield value


def text_body(message: Dict[str, Any]) -> Optional[Any]:
    """`text.body` of a message, or None when the message carries no text object."""
    text = message.get("text")
    if not isinstance(text, dict):
        return None
    return text.get("body") or None


def status_record(status: Dict[str, Any]) -> Dict[str, Any]:
    """Delivery status -> `status` event payload."""
    return StatusRecord(
        status=status.get("status"),
        message_id=status.get("id"),
        recipient_id=status.get("recipient_id"),
        timestamp=status.get("timestamp"),
        conversation=status.get("conversation"),
        pricing=status.get("pricing"),
        errors=status.get("errors"),
    ).model_dump(exclude_none=True)


def message_record(message: Dict[str, Any]) -> Dict[str, Any]:
    """Inbound message -> `message` event payload."""
    return MessageRecord(
        from_=message.get("from"),
        type=message.get("type"),
        msg_id=message.get("id"),
        text=text_body(message),
        button=message.get("button") or None,
        interactive=message.get("interactive") or None,
        image=message.get("image") or None,
        document=message.get("document") or None,
        timestamp=message.get("timestamp"),
    ).model_dump(by_alias=True)
