from typing import Protocol
from dataclasses import dataclass

@dataclass(frozen=True)
class SmsResult:
    success: bool
    id: str
    error: str | None = None

class SmsGateway(Protocol):
    async def send(self, phone_number:str, message:str) -> SmsResult: ...
