from datetime import datetime
from typing import Any, Literal
from pydantic import Field, AliasChoices
from app.schemas.base import CamelModel
from app.schemas.fleet import DriverOut, VehicleOut

class EmergencyTriggerIn(CamelModel):
    driver_number: str
    vehicle_number: str
    # {"latitude": .., "longitude": ..} or {"lat": .., "lng": ..}; checked by the service
    coordinates: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("coordinates", "location")
    )
    latitude: Any = None
    longitude: Any = None
    video_url: str | None = Field(default=None, validation_alias=AliasChoices("video", "videoUrl", "video_url"))
    timestamp: datetime | None = None

    def raw_coordinates(self) -> dict[str, Any] | None:
        if self.coordinates is not None:
            return self.coordinates
        if self.latitude is None and self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}

class AcknowledgeIn(CamelModel):
    emergency_id: int

class NearbyFacilityOut(CamelModel):
    name: str
    type: Literal["police", "hospital"]
    latitude: float
    longitude: float
    distance: float
    phone: str

class EmergencyOut(CamelModel):
    id: int
    driver_number: str
    vehicle_number: str
    latitude: float
    longitude: float
    timestamp: datetime
    video_url: str | None = None
    status: str
    created_at: datetime
    acknowledged_at: datetime | None = None

class EmergencyDetailOut(EmergencyOut):
    driver: DriverOut | None = None
    vehicle: VehicleOut | None = None
    nearby_facilities: list[NearbyFacilityOut] = Field(default_factory=list)
    message: str | None = None
