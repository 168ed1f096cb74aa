from __future__ import annotations
import secrets
import structlog
from app.domain.interfaces.sms_gateway import SmsResult
from app.notifications.base import SmsProvider

logger = structlog.get_logger("sms.simulated")

class SimulatedSmsProvider(SmsProvider):
    """Logs outgoing texts instead of sending them. Used in dev and when no API key is set."""

    name = "simulated"

    async def send(self, phone_number: str, message: str) -> SmsResult:
        message_id = secrets.token_hex(8)
        logger.info("SMS simulated", to=phone_number, message=message, message_id=message_id)
        return SmsResult(success=True, id=message_id)
