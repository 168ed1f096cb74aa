from __future__ import annotations
from typing import Sequence
from sqlalchemy.exc import IntegrityError
from app.core.errors import ConflictError, NotFoundError
from app.domain.entities.driver import Driver
from app.domain.entities.vehicle import Vehicle
from app.domain.interfaces.fleet_repo import FleetRepository

class FleetService:
    """Thin driver/vehicle registry backing the trip and emergency ledgers."""

    def __init__(self, repo: FleetRepository):
        self.repo = repo

    async def register_driver(self, *, driver_number:str, name:str, phone_number:str, license_number:str) -> Driver:
        if await self.repo.get_driver(driver_number) is not None:
            raise ConflictError(f"Driver {driver_number} already registered")
        try:
            return await self.repo.create_driver(driver_number=driver_number, name=name, phone_number=phone_number, license_number=license_number)
        except IntegrityError as e:
            raise ConflictError(f"Driver {driver_number} already registered") from e

    async def register_vehicle(self, *, vehicle_number:str, type:str, fuel_capacity:int=0) -> Vehicle:
        if await self.repo.get_vehicle(vehicle_number) is not None:
            raise ConflictError(f"Vehicle {vehicle_number} already registered")
        try:
            return await self.repo.create_vehicle(vehicle_number=vehicle_number, type=type, fuel_capacity=fuel_capacity)
        except IntegrityError as e:
            raise ConflictError(f"Vehicle {vehicle_number} already registered") from e

    async def update_driver_contact(self, driver_number:str, *, name:str|None=None, phone_number:str|None=None) -> Driver:
        values = {k: v for k, v in {"name": name, "phone_number": phone_number}.items() if v is not None}
        driver = await self.repo.update_driver(driver_number, values)
        if driver is None:
            raise NotFoundError(f"Driver {driver_number} not found")
        return driver

    async def update_vehicle_status(self, vehicle_number:str, **values) -> Vehicle:
        values = {k: v for k, v in values.items() if v is not None}
        vehicle = await self.repo.update_vehicle(vehicle_number, values)
        if vehicle is None:
            raise NotFoundError(f"Vehicle {vehicle_number} not found")
        return vehicle

    async def list_drivers(self) -> Sequence[Driver]:
        return await self.repo.list_drivers()

    async def list_vehicles(self) -> Sequence[Vehicle]:
        return await self.repo.list_vehicles()
