from sqlalchemy import String, Integer, ForeignKey, DateTime, Float, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from app.infrastructure.db.base import Base, utcnow

EMERGENCY_ACTIVE = "ACTIVE"
EMERGENCY_ACKNOWLEDGED = "ACKNOWLEDGED"

class Emergency(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_number: Mapped[str] = mapped_column(ForeignKey("driver.driver_number"), index=True)
    vehicle_number: Mapped[str] = mapped_column(ForeignKey("vehicle.vehicle_number"), index=True)
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    video_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default=EMERGENCY_ACTIVE, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    acknowledged_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

Index("ix_emergency_pair_status", Emergency.driver_number, Emergency.vehicle_number, Emergency.status)
