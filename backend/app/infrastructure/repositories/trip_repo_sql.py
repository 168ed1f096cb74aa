from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Sequence, Optional
from datetime import datetime
from app.domain.entities.trip import Trip, TRIP_ACTIVE, TRIP_COMPLETED

class SQLTripRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, *, driver_number:str, vehicle_number:str, temporary_username:str, temporary_password_hash:str, created_at:datetime) -> Trip:
        obj = Trip(
            driver_number=driver_number,
            vehicle_number=vehicle_number,
            temporary_username=temporary_username,
            temporary_password_hash=temporary_password_hash,
            status=TRIP_ACTIVE,
            created_at=created_at,
        )
        self.session.add(obj)
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def get(self, trip_id:int) -> Optional[Trip]:
        res = await self.session.execute(select(Trip).where(Trip.id==trip_id))
        return res.scalar_one_or_none()

    async def _latest_active(self, *criteria) -> Optional[Trip]:
        stmt = (
            select(Trip)
            .where(Trip.status==TRIP_ACTIVE, *criteria)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
            .limit(1)
        )
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def latest_active_for_driver(self, driver_number:str) -> Optional[Trip]:
        return await self._latest_active(Trip.driver_number==driver_number)

    async def latest_active_for_vehicle(self, vehicle_number:str) -> Optional[Trip]:
        return await self._latest_active(Trip.vehicle_number==vehicle_number)

    async def active_by_username(self, temporary_username:str) -> Optional[Trip]:
        return await self._latest_active(Trip.temporary_username==temporary_username)

    async def mark_completed(self, trip:Trip, *, completed_at:datetime) -> Trip:
        if trip.status != TRIP_COMPLETED:
            trip.status = TRIP_COMPLETED
            trip.completed_at = completed_at
            await self.session.commit()
            await self.session.refresh(trip)
        return trip

    async def list(self) -> Sequence[Trip]:
        res = await self.session.execute(select(Trip).order_by(Trip.created_at.desc(), Trip.id.desc()))
        return list(res.scalars().all())
