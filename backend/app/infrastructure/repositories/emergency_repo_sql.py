from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Sequence, Optional, Tuple
from datetime import datetime
from app.domain.entities.emergency import Emergency, EMERGENCY_ACTIVE, EMERGENCY_ACKNOWLEDGED
from app.domain.entities.driver import Driver
from app.domain.entities.vehicle import Vehicle

class SQLEmergencyRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, *, driver_number:str, vehicle_number:str, latitude:float, longitude:float, timestamp:datetime, video_url:str|None, created_at:datetime) -> Emergency:
        obj = Emergency(
            driver_number=driver_number,
            vehicle_number=vehicle_number,
            latitude=latitude,
            longitude=longitude,
            timestamp=timestamp,
            video_url=video_url,
            status=EMERGENCY_ACTIVE,
            created_at=created_at,
        )
        self.session.add(obj)
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def get(self, emergency_id:int) -> Optional[Emergency]:
        res = await self.session.execute(select(Emergency).where(Emergency.id==emergency_id))
        return res.scalar_one_or_none()

    async def latest_active_for_pair(self, driver_number:str, vehicle_number:str) -> Optional[Emergency]:
        stmt = (
            select(Emergency)
            .where(
                Emergency.driver_number==driver_number,
                Emergency.vehicle_number==vehicle_number,
                Emergency.status==EMERGENCY_ACTIVE,
            )
            .order_by(Emergency.created_at.desc(), Emergency.id.desc())
            .limit(1)
        )
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def acknowledge(self, emergency:Emergency, *, acknowledged_at:datetime) -> int:
        """Acknowledge ``emergency`` and every other ACTIVE row of its driver/vehicle pair.

        Returns the number of rows that moved to ACKNOWLEDGED. Rows already
        acknowledged keep their original ``acknowledged_at``.
        """
        stmt = (
            update(Emergency)
            .where(
                Emergency.driver_number==emergency.driver_number,
                Emergency.vehicle_number==emergency.vehicle_number,
                Emergency.status==EMERGENCY_ACTIVE,
            )
            .values(status=EMERGENCY_ACKNOWLEDGED, acknowledged_at=acknowledged_at)
            .execution_options(synchronize_session="fetch")
        )
        res = await self.session.execute(stmt)
        await self.session.commit()
        await self.session.refresh(emergency)
        return res.rowcount or 0

    async def list_with_parties(self) -> Sequence[Tuple[Emergency, Optional[Driver], Optional[Vehicle]]]:
        stmt = (
            select(Emergency, Driver, Vehicle)
            .outerjoin(Driver, Driver.driver_number==Emergency.driver_number)
            .outerjoin(Vehicle, Vehicle.vehicle_number==Emergency.vehicle_number)
            .order_by(Emergency.created_at.desc(), Emergency.id.desc())
        )
        res = await self.session.execute(stmt)
        return [tuple(row) for row in res.all()]
