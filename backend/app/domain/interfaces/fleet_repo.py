from typing import Protocol, Optional, Sequence, Mapping, Any
from app.domain.entities.driver import Driver
from app.domain.entities.vehicle import Vehicle

class FleetRepository(Protocol):
    async def get_driver(self, driver_number:str) -> Optional[Driver]: ...
    async def get_vehicle(self, vehicle_number:str) -> Optional[Vehicle]: ...
    async def create_driver(self, *, driver_number:str, name:str, phone_number:str, license_number:str) -> Driver: ...
    async def create_vehicle(self, *, vehicle_number:str, type:str, fuel_capacity:int) -> Vehicle: ...
    async def update_driver(self, driver_number:str, values:Mapping[str, Any]) -> Optional[Driver]: ...
    async def update_vehicle(self, vehicle_number:str, values:Mapping[str, Any]) -> Optional[Vehicle]: ...
    async def list_drivers(self) -> Sequence[Driver]: ...
    async def list_vehicles(self) -> Sequence[Vehicle]: ...
