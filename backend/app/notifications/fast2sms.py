from __future__ import annotations
import re
import secrets
import httpx
import structlog
from app.core.config import settings
from app.domain.interfaces.sms_gateway import SmsResult
from app.notifications.base import SmsProvider

logger = structlog.get_logger("sms.fast2sms")

def format_indian_number(phone_number: str) -> str:
    """Reduce a phone number to the 10 local digits Fast2SMS expects."""
    digits = re.sub(r"\D", "", phone_number)
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    return digits

class Fast2SMSProvider(SmsProvider):
    name = "fast2sms"

    def __init__(self, api_key:str|None=None, url:str|None=None, transport:httpx.AsyncBaseTransport|None=None):
        self.api_key = api_key or settings.fast2sms_api_key
        self.url = url or settings.fast2sms_url
        self.headers = {"authorization": self.api_key, "Content-Type": "application/json"}
        self._transport = transport

    async def _post(self, body: dict) -> httpx.Response:
        async with httpx.AsyncClient(headers=self.headers, timeout=20, transport=self._transport) as client:
            return await client.post(self.url, json=body)

    async def send(self, phone_number: str, message: str) -> SmsResult:
        number = format_indian_number(phone_number)
        if len(number) != 10:
            return SmsResult(
                success=False,
                id=secrets.token_hex(8),
                error=f"Invalid Indian phone number. Expected 10 digits, got {len(number)}",
            )

        body = {"route": "q", "message": message, "language": "english", "numbers": number}
        r = await self._post(body)
        try:
            data = r.json()
        except ValueError:
            data = {"message": r.text}

        logger.debug("Fast2SMS response", status_code=r.status_code, body=data)
        if r.status_code < 400 and (data.get("return") is True or data.get("status") == "success"):
            message_id = str(data.get("request_id") or data.get("message_id") or secrets.token_hex(8))
            return SmsResult(success=True, id=message_id)

        error = data.get("message") or data.get("error") or f"HTTP {r.status_code}"
        if isinstance(error, list):
            error = "; ".join(str(e) for e in error)
        return SmsResult(success=False, id=secrets.token_hex(8), error=str(error))
