"""
Emergency state machine: trigger, dedup and cascading acknowledgment.

An emergency is ACTIVE from the moment it is triggered until a person
acknowledges it; ACKNOWLEDGED is terminal. Retrying devices are collapsed onto
the most recent ACTIVE record of their driver/vehicle pair while it is inside
the dedup window. Near-simultaneous triggers can still both create a row, so
acknowledging any emergency of a pair acknowledges all of its ACTIVE rows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

import structlog

from app.core.errors import NotFoundError, ValidationError
from app.domain import events
from app.domain.entities.driver import Driver
from app.domain.entities.emergency import Emergency
from app.domain.entities.vehicle import Vehicle
from app.domain.interfaces.broadcaster import Broadcaster
from app.domain.interfaces.emergency_repo import EmergencyRepository
from app.domain.interfaces.fleet_repo import FleetRepository
from app.infrastructure.db.base import utcnow
from app.schemas.emergency import EmergencyDetailOut, EmergencyOut, NearbyFacilityOut
from app.schemas.fleet import DriverOut, VehicleOut
from app.services.geo import NearbyFacility, nearby_facilities, DEFAULT_RADIUS_KM
from app.services.notification_service import NotificationDispatcher

logger = structlog.get_logger("emergencies")

DEFAULT_DEDUP_WINDOW = timedelta(minutes=5)
ACKNOWLEDGEMENT_MESSAGE = "Emergency acknowledged by manager"
REPLAY_MESSAGE = "Emergency already active for this driver/vehicle"


@dataclass
class EmergencyView:
    emergency: Emergency
    driver: Optional[Driver] = None
    vehicle: Optional[Vehicle] = None
    nearby_facilities: List[NearbyFacility] = field(default_factory=list)
    message: Optional[str] = None

    def to_detail(self) -> EmergencyDetailOut:
        return EmergencyDetailOut(
            **EmergencyOut.model_validate(self.emergency).model_dump(),
            driver=DriverOut.model_validate(self.driver) if self.driver else None,
            vehicle=VehicleOut.model_validate(self.vehicle) if self.vehicle else None,
            nearby_facilities=[NearbyFacilityOut(**f.to_dict()) for f in self.nearby_facilities],
            message=self.message,
        )


@dataclass
class EmergencyTrigger(EmergencyView):
    # False when a retry was collapsed onto an existing record
    created: bool = True


def _coordinate(value: Any, name: str, limit: float) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be numeric") from None
    if not math.isfinite(number) or abs(number) > limit:
        raise ValidationError(f"{name} out of range")
    return number


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_coordinates(raw: Optional[Mapping[str, Any]]) -> Tuple[float, float]:
    """(latitude, longitude) from ``{"latitude", "longitude"}`` or ``{"lat", "lng"}``."""
    if not isinstance(raw, Mapping):
        raise ValidationError("Location is required")
    lat = raw.get("latitude", raw.get("lat"))
    lng = raw.get("longitude", raw.get("lng"))
    return _coordinate(lat, "latitude", 90.0), _coordinate(lng, "longitude", 180.0)


class EmergencyService:
    def __init__(
        self,
        repo: EmergencyRepository,
        fleet: FleetRepository,
        broadcaster: Broadcaster,
        notifier: NotificationDispatcher,
        *,
        police_phone: str,
        hospital_phone: str,
        dedup_window: timedelta = DEFAULT_DEDUP_WINDOW,
        facility_radius_km: float = DEFAULT_RADIUS_KM,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repo = repo
        self.fleet = fleet
        self.broadcaster = broadcaster
        self.notifier = notifier
        self.police_phone = police_phone
        self.hospital_phone = hospital_phone
        self.dedup_window = dedup_window
        self.facility_radius_km = facility_radius_km
        self.clock = clock

    def nearby(self, latitude: Any, longitude: Any) -> List[NearbyFacility]:
        lat, lng = parse_coordinates({"latitude": latitude, "longitude": longitude})
        return nearby_facilities(lat, lng, self.police_phone, self.hospital_phone, self.facility_radius_km)

    async def _publish(self, event: str, payload: Mapping[str, Any]) -> None:
        try:
            delivered = await self.broadcaster.publish(event, payload)
            logger.info("Broadcast sent", broadcast_event=event, delivered=delivered)
        except Exception:
            # push is best-effort, clients reconcile through the list poll
            logger.error("Broadcast failed", broadcast_event=event, exc_info=True)

    async def trigger(
        self,
        driver_number: str,
        vehicle_number: str,
        coordinates: Optional[Mapping[str, Any]],
        video_url: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> EmergencyTrigger:
        if not driver_number or not vehicle_number:
            raise ValidationError("driverNumber and vehicleNumber are required")

        now = self.clock()
        existing = await self.repo.latest_active_for_pair(driver_number, vehicle_number)
        if existing is not None and now - existing.created_at <= self.dedup_window:
            logger.info(
                "Emergency trigger deduplicated",
                emergency_id=existing.id, driver_number=driver_number, vehicle_number=vehicle_number,
            )
            return EmergencyTrigger(
                emergency=existing,
                driver=await self.fleet.get_driver(driver_number),
                vehicle=await self.fleet.get_vehicle(vehicle_number),
                nearby_facilities=nearby_facilities(
                    existing.latitude, existing.longitude,
                    self.police_phone, self.hospital_phone, self.facility_radius_km,
                ),
                message=REPLAY_MESSAGE,
                created=False,
            )

        latitude, longitude = parse_coordinates(coordinates)

        driver = await self.fleet.get_driver(driver_number)
        vehicle = await self.fleet.get_vehicle(vehicle_number)
        if driver is None or vehicle is None:
            raise NotFoundError("Driver or vehicle not found")

        emergency = await self.repo.create(
            driver_number=driver_number,
            vehicle_number=vehicle_number,
            latitude=latitude,
            longitude=longitude,
            timestamp=_naive_utc(timestamp) or now,
            video_url=video_url,
            created_at=now,
        )
        logger.warning(
            "Emergency triggered",
            emergency_id=emergency.id, driver_number=driver_number, vehicle_number=vehicle_number,
            latitude=latitude, longitude=longitude,
        )

        facilities = nearby_facilities(
            latitude, longitude, self.police_phone, self.hospital_phone, self.facility_radius_km,
        )
        result = EmergencyTrigger(emergency=emergency, driver=driver, vehicle=vehicle, nearby_facilities=facilities)
        await self._publish(events.RECEIVE_EMERGENCY, result.to_detail().to_wire())

        alert = (
            f"EMERGENCY ALERT\nDriver: {driver.name} ({driver_number})\nVehicle: {vehicle_number}\n"
            f"Location: {latitude:.6f}, {longitude:.6f}\nTime: {now:%Y-%m-%d %H:%M:%S} UTC"
        )
        for phone in (self.police_phone, self.hospital_phone):
            await self.notifier.dispatch(phone, alert)

        return result

    async def acknowledge(self, emergency_id: int) -> Emergency:
        emergency = await self.repo.get(emergency_id)
        if emergency is None:
            raise NotFoundError(f"Emergency {emergency_id} not found")

        acknowledged = await self.repo.acknowledge(emergency, acknowledged_at=self.clock())
        logger.info(
            "Emergency acknowledged",
            emergency_id=emergency.id, driver_number=emergency.driver_number,
            vehicle_number=emergency.vehicle_number, rows_acknowledged=acknowledged,
        )

        view = EmergencyView(
            emergency=emergency,
            driver=await self.fleet.get_driver(emergency.driver_number),
            vehicle=await self.fleet.get_vehicle(emergency.vehicle_number),
        )
        await self._publish(events.STOP_ALARM, {
            "emergencyId": emergency.id,
            "driverNumber": emergency.driver_number,
            "vehicleNumber": emergency.vehicle_number,
        })
        await self._publish(events.RECEIVE_ACKNOWLEDGEMENT, {
            "emergencyId": emergency.id,
            "message": ACKNOWLEDGEMENT_MESSAGE,
            "emergency": view.to_detail().to_wire(),
        })
        return emergency

    async def list_emergencies(self) -> Sequence[EmergencyView]:
        rows = await self.repo.list_with_parties()
        return [EmergencyView(emergency=e, driver=d, vehicle=v) for e, d, v in rows]
