from typing import Protocol, Optional, Sequence, Tuple
from datetime import datetime
from app.domain.entities.emergency import Emergency
from app.domain.entities.driver import Driver
from app.domain.entities.vehicle import Vehicle

class EmergencyRepository(Protocol):
    async def create(self, *, driver_number:str, vehicle_number:str, latitude:float, longitude:float, timestamp:datetime, video_url:str|None, created_at:datetime) -> Emergency: ...
    async def get(self, emergency_id:int) -> Optional[Emergency]: ...
    async def latest_active_for_pair(self, driver_number:str, vehicle_number:str) -> Optional[Emergency]: ...
    async def acknowledge(self, emergency:Emergency, *, acknowledged_at:datetime) -> int: ...
    async def list_with_parties(self) -> Sequence[Tuple[Emergency, Optional[Driver], Optional[Vehicle]]]: ...
