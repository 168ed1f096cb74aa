from typing import Protocol, Mapping, Any

class Broadcaster(Protocol):
    async def publish(self, event:str, payload:Mapping[str, Any]) -> int: ...
