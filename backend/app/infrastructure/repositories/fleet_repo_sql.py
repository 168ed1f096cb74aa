from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Sequence, Optional, Mapping, Any
from app.domain.entities.driver import Driver
from app.domain.entities.vehicle import Vehicle

class SQLFleetRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_driver(self, driver_number:str) -> Optional[Driver]:
        res = await self.session.execute(select(Driver).where(Driver.driver_number==driver_number))
        return res.scalar_one_or_none()

    async def get_vehicle(self, vehicle_number:str) -> Optional[Vehicle]:
        res = await self.session.execute(select(Vehicle).where(Vehicle.vehicle_number==vehicle_number))
        return res.scalar_one_or_none()

    async def create_driver(self, *, driver_number:str, name:str, phone_number:str, license_number:str) -> Driver:
        obj = Driver(driver_number=driver_number, name=name, phone_number=phone_number, license_number=license_number)
        self.session.add(obj)
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def create_vehicle(self, *, vehicle_number:str, type:str, fuel_capacity:int) -> Vehicle:
        obj = Vehicle(vehicle_number=vehicle_number, type=type, fuel_capacity=fuel_capacity)
        self.session.add(obj)
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def update_driver(self, driver_number:str, values:Mapping[str, Any]) -> Optional[Driver]:
        if values:
            await self.session.execute(update(Driver).where(Driver.driver_number==driver_number).values(**values))
            await self.session.commit()
        obj = await self.get_driver(driver_number)
        if obj is not None:
            await self.session.refresh(obj)
        return obj

    async def update_vehicle(self, vehicle_number:str, values:Mapping[str, Any]) -> Optional[Vehicle]:
        if values:
            await self.session.execute(update(Vehicle).where(Vehicle.vehicle_number==vehicle_number).values(**values))
            await self.session.commit()
        obj = await self.get_vehicle(vehicle_number)
        if obj is not None:
            await self.session.refresh(obj)
        return obj

    async def list_drivers(self) -> Sequence[Driver]:
        res = await self.session.execute(select(Driver).order_by(Driver.id.desc()))
        return list(res.scalars().all())

    async def list_vehicles(self) -> Sequence[Vehicle]:
        res = await self.session.execute(select(Vehicle).order_by(Vehicle.id.desc()))
        return list(res.scalars().all())
