import logging
import re

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class WhatsAppError(RuntimeError):
    pass


class WhatsAppService:
    """
    Thin client for the WhatsApp Cloud API.
    Only plain text messages are sent; templates are managed in the Meta console.
    """

    @classmethod
    def _get_headers(cls):
        return {
            "Authorization": f"Bearer {settings.WHATSAPP_ACCESS_TOKEN}",
            "Content-Type": "application/json",
        }

    @classmethod
    def is_configured(cls):
        return bool(settings.WHATSAPP_ACCESS_TOKEN and settings.WHATSAPP_PHONE_NUMBER_ID)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Digits only; Brazilian numbers without country code get +55."""
        digits = re.sub(r"\D", "", phone or "")
        if len(digits) in (10, 11):
            digits = "55" + digits
        return digits

    @classmethod
    def send_text_message(cls, phone: str, message: str):
        to = cls.normalize_phone(phone)
        if not to:
            raise WhatsAppError("Recipient phone number is empty.")
        if not cls.is_configured():
            raise WhatsAppError("WhatsApp API credentials are not configured.")

        url = f"{settings.WHATSAPP_API_BASE_URL}/{settings.WHATSAPP_PHONE_NUMBER_ID}/messages"
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": message},
        }

        try:
            response = requests.post(url, json=payload, headers=cls._get_headers(), timeout=15)
            response.raise_for_status()
            data = response.json()
            logger.info("WhatsApp message sent to %s", to)
            return data
        except requests.exceptions.RequestException as e:
            resp_text = getattr(e, "response", None) is not None and e.response.text or None
            logger.exception("WhatsApp send failed: %s", resp_text)
            raise WhatsAppError(f"Failed to send WhatsApp message: {resp_text or str(e)}") from e
