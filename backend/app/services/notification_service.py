from __future__ import annotations
import secrets
import structlog
from app.core.errors import DispatchFailure
from app.domain.interfaces.sms_gateway import SmsGateway, SmsResult

logger = structlog.get_logger("notifications")

class NotificationDispatcher:
    """Best-effort text delivery. ``dispatch`` never raises; failures are logged."""

    def __init__(self, gateway: SmsGateway):
        self.gateway = gateway

    async def dispatch(self, phone_number: str, message: str) -> SmsResult:
        try:
            result = await self.gateway.send(phone_number, message)
        except Exception as e:
            failure = DispatchFailure(phone_number, str(e) or e.__class__.__name__)
            logger.error("SMS dispatch failed", to=phone_number, error=failure.message, exc_info=True)
            return SmsResult(success=False, id=secrets.token_hex(8), error=failure.reason)

        if not result.success:
            failure = DispatchFailure(phone_number, result.error or "unknown error")
            logger.warning("SMS dispatch failed", to=phone_number, error=failure.message, message_id=result.id)
        else:
            logger.info("SMS dispatched", to=phone_number, message_id=result.id)
        return result
