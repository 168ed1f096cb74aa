from __future__ import annotations
from app.core.config import settings
from app.notifications.base import SmsProvider
from app.notifications.fast2sms import Fast2SMSProvider
from app.notifications.simulated import SimulatedSmsProvider

def get_sms_provider(name: str | None = None) -> SmsProvider:
    provider = (name or settings.sms_provider or "auto").lower()
    if provider == "auto":
        provider = "fast2sms" if settings.fast2sms_api_key else "simulated"
    if provider == "fast2sms":
        return Fast2SMSProvider()
    if provider == "simulated":
        return SimulatedSmsProvider()
    raise ValueError(f"Unknown SMS provider: {provider}")
