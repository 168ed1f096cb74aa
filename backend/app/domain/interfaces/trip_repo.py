from typing import Protocol, Optional, Sequence
from datetime import datetime
from app.domain.entities.trip import Trip

class TripRepository(Protocol):
    async def create(self, *, driver_number:str, vehicle_number:str, temporary_username:str, temporary_password_hash:str, created_at:datetime) -> Trip: ...
    async def get(self, trip_id:int) -> Optional[Trip]: ...
    async def latest_active_for_driver(self, driver_number:str) -> Optional[Trip]: ...
    async def latest_active_for_vehicle(self, vehicle_number:str) -> Optional[Trip]: ...
    async def active_by_username(self, temporary_username:str) -> Optional[Trip]: ...
    async def mark_completed(self, trip:Trip, *, completed_at:datetime) -> Trip: ...
    async def list(self) -> Sequence[Trip]: ...
