"""
WhatsApp Signature Verification

SECURITY BOUNDARY - Verify Meta HMAC signature.
No retries. No logic.
"""

import hashlib
import hmac
from typing import Optional

from fastapi import HTTPException, status


class SignatureVerificationError(Exception):
    """Signature verification failed."""
    pass


def verify_signature(
    body: bytes,
    signature: Optional[str],
    app_secret: Optional[str],
) -> None:
    """
    Verify Meta HMAC-SHA256 signature on a WhatsApp webhook.

    WhatsApp sends:
    - X-Hub-Signature-256 header with HMAC
    - Request body

    Verification is disabled when no app secret is configured.

    Args:
        body: Raw request body bytes
        signature: Value of the X-Hub-Signature-256 header
        app_secret: Meta app secret, or None

    Raises:
        SignatureVerificationError: Missing or invalid signature
    """
    if not app_secret:
        return

    expected_signature = "sha256=" + hmac.new(
        key=app_secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()

    # Compare (constant-time to prevent timing attacks)
    if not hmac.compare_digest((signature or "").encode("utf-8"), expected_signature.encode("utf-8")):
        raise SignatureVerificationError("invalid_signature")


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_challenge: Optional[str],
    hub_verify_token: Optional[str],
    expected_token: str,
) -> str:
    """
    Verify webhook subscription challenge from WhatsApp.

    WhatsApp calls GET /whatsapp/webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    Returns:
        The challenge string to echo back

    Raises:
        HTTPException(403): Wrong mode or token
    """
    if hub_mode != "subscribe" or not expected_token or hub_verify_token != expected_token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Webhook verification failed",
        )

    return hub_challenge or ""
