from sqlalchemy import String, Integer, ForeignKey, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from app.infrastructure.db.base import Base, utcnow

TRIP_ACTIVE = "ACTIVE"
TRIP_COMPLETED = "COMPLETED"

class Trip(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_number: Mapped[str] = mapped_column(ForeignKey("driver.driver_number"), index=True)
    vehicle_number: Mapped[str] = mapped_column(ForeignKey("vehicle.vehicle_number"), index=True)
    temporary_username: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    # sha256 hex digest; the plain password only leaves the service once, at assignment
    temporary_password_hash: Mapped[str] = mapped_column(String(64))
    status: Mapped[str] = mapped_column(String(16), default=TRIP_ACTIVE, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

Index("ix_trip_status_created", Trip.status, Trip.created_at)
