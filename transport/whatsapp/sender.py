"""
WhatsApp Response Sender

Sends replies through the WhatsApp Cloud API.
No retries. Failed sends are recorded in the event log.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


class EventRecorder(Protocol):
    def enqueue(self, kind: str, payload: Optional[Dict[str, Any]] = None) -> None: ...


class WhatsAppSenderError(Exception):
    """Failed to send a message to WhatsApp."""
    pass


class WhatsAppSender:
    """
    Outbound messaging for one business phone number.

    Args:
        events: Where send failures and hand-offs are recorded
        access_token: Cloud API bearer token
        phone_number_id: Business phone number id
        ventas_number_e164: Sales contact, e.g. "+5491100000000"
        api_version: Graph API version
        base_url: Graph API base URL
        http_client: Optional shared client (tests inject a MockTransport)
    """

    def __init__(
        self,
        events: EventRecorder,
        access_token: str,
        phone_number_id: str,
        ventas_number_e164: str,
        api_version: str = "v20.0",
        base_url: str = "https://graph.facebook.com",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.events = events
        self.access_token = access_token
        self.phone_number_id = phone_number_id
        self.ventas_number_e164 = ventas_number_e164
        self.ventas_number_plain = ventas_number_e164.replace("+", "")
        self.endpoint = f"{base_url.rstrip('/')}/{api_version}/{phone_number_id}/messages"
        self._client = http_client

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        if self._client is not None:
            return await self._client.post(self.endpoint, json=body, headers=headers, timeout=30.0)
        async with httpx.AsyncClient() as client:
            return await client.post(self.endpoint, json=body, headers=headers, timeout=30.0)

    async def send_message(self, to: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one message.

        Returns:
            Cloud API response body

        Raises:
            WhatsAppSenderError: Non-2xx response or transport failure
        """
        body = {"messaging_product": "whatsapp", "to": to, **payload}

        try:
            response = await self._post(body)
        except httpx.RequestError as e:
            logger.error(f"HTTP request failed: {e}", exc_info=True, extra={"to": to})
            raise WhatsAppSenderError(f"HTTP request failed: {e}")

        try:
            result = response.json()
        except ValueError:
            result = {}

        if not response.is_success:
            logger.error(
                f"WhatsApp API error: {response.status_code}",
                extra={"status_code": response.status_code, "error_body": result},
            )
            self.events.enqueue(
                "error",
                {
                    "where": "sendMessage",
                    "status": response.status_code,
                    "json": result,
                    "to": to,
                    "payload": payload,
                },
            )
            raise WhatsAppSenderError(f"WhatsApp API returned {response.status_code}")

        logger.info(
            f"Message sent to {to}",
            extra={"to": to, "response_id": (result.get("messages") or [{}])[0].get("id")},
        )
        return result

    async def send_text(self, to: str, text: str) -> Dict[str, Any]:
        return await self.send_message(to, {"type": "text", "text": {"body": text}})

    async def send_quick_reply_ventas(self, to: str) -> Dict[str, Any]:
        """Offer the Sales / human-attention buttons."""
        return await self.send_message(
            to,
            {
                "type": "interactive",
                "interactive": {
                    "type": "button",
                    "body": {"text": "¿Querés hablar con Ventas?"},
                    "action": {
                        "buttons": [
                            {"type": "reply", "reply": {"id": "CONTACTAR_VENTAS", "title": "Hablar con Ventas"}},
                            {"type": "reply", "reply": {"id": "ATENCION_HUMANA", "title": "Atención humana"}},
                        ],
                    },
                },
            },
        )

    async def send_derivacion(self, to: str) -> None:
        """Hand the user off to Sales: contact card, then a wa.me link."""
        await self.send_message(
            to,
            {
                "type": "contacts",
                "contacts": [
                    {
                        "name": {"formatted_name": "NIMAT Ventas"},
                        "phones": [
                            {
                                "phone": self.ventas_number_e164,
                                "type": "CELL",
                                "wa_id": self.ventas_number_plain,
                            }
                        ],
                    }
                ],
            },
        )

        text = "\n".join([
            "Te derivo con nuestro equipo de Ventas:",
            f"➡️ wa.me/{self.ventas_number_plain}",
            f"También podés agendar este contacto: {self.ventas_number_e164}",
        ])
        await self.send_text(to, text)
        self.events.enqueue("action", {"action": "derivacion_enviada", "to": to})
