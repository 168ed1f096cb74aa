from __future__ import annotations
from abc import ABC, abstractmethod
from app.domain.interfaces.sms_gateway import SmsResult

class SmsProvider(ABC):
    name: str = "base"

    @abstractmethod
    async def send(self, phone_number: str, message: str) -> SmsResult:
        """
        Deliver ``message`` to ``phone_number``.
        Provider errors are reported through ``SmsResult.success``;
        implementations may still raise on transport failures.
        """
        ...
