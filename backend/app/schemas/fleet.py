from datetime import datetime
from pydantic import Field
from app.schemas.base import CamelModel

class DriverCreate(CamelModel):
    driver_number: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=120)
    phone_number: str = Field(min_length=1, max_length=32)
    license_number: str = Field(min_length=1, max_length=64)

class DriverUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    phone_number: str | None = Field(default=None, min_length=1, max_length=32)

class DriverOut(CamelModel):
    id: int
    driver_number: str
    name: str
    phone_number: str
    license_number: str
    created_at: datetime | None = None

class VehicleCreate(CamelModel):
    vehicle_number: str = Field(min_length=1, max_length=64)
    type: str = Field(min_length=1, max_length=40)
    fuel_capacity: int = Field(default=0, ge=0)

class VehicleUpdate(CamelModel):
    fuel_capacity: int | None = Field(default=None, ge=0)
    current_fuel: int | None = Field(default=None, ge=0)
    current_mileage: int | None = Field(default=None, ge=0)

class VehicleOut(CamelModel):
    id: int
    vehicle_number: str
    type: str
    fuel_capacity: int
    current_fuel: int | None = None
    current_mileage: int | None = None
    created_at: datetime | None = None
