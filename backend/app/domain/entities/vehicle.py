from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from app.infrastructure.db.base import Base, utcnow

class Vehicle(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_number: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    type: Mapped[str] = mapped_column(String(40))  # Ambulance, Police, Truck, ...
    fuel_capacity: Mapped[int] = mapped_column(Integer, default=0)
    current_fuel: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_mileage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
