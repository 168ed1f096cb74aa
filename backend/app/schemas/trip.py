from datetime import datetime
from pydantic import Field
from app.schemas.base import CamelModel
from app.schemas.fleet import DriverOut, VehicleOut

class TripAssignIn(CamelModel):
    driver_number: str = Field(min_length=1)
    vehicle_number: str = Field(min_length=1)

class TripIdIn(CamelModel):
    trip_id: int

class DriverLoginIn(CamelModel):
    temporary_username: str
    temporary_password: str

class TripOut(CamelModel):
    id: int
    driver_number: str
    vehicle_number: str
    temporary_username: str
    status: str
    created_at: datetime
    completed_at: datetime | None = None
    driver: DriverOut | None = None
    vehicle: VehicleOut | None = None

class TripAssignmentOut(TripOut):
    # shown once; only a digest is stored
    temporary_password: str
