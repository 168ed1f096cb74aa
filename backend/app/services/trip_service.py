from __future__ import annotations
import hmac
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence
import structlog
from app.core.errors import ConflictError, NotFoundError
from app.domain.entities.driver import Driver
from app.domain.entities.trip import Trip, TRIP_ACTIVE
from app.domain.entities.vehicle import Vehicle
from app.domain.interfaces.fleet_repo import FleetRepository
from app.domain.interfaces.trip_repo import TripRepository
from app.infrastructure.db.base import utcnow
from app.services.credentials import issue_credentials, hash_password, verify_password
from app.services.notification_service import NotificationDispatcher

logger = structlog.get_logger("trips")

# compared against when the username is unknown, so both paths do a digest check
_UNKNOWN_USER_HASH = hash_password("")

@dataclass
class TripView:
    trip: Trip
    driver: Optional[Driver]
    vehicle: Optional[Vehicle]

@dataclass
class TripAssignment(TripView):
    temporary_password: str

class TripService:
    """Driver/vehicle trip sessions and the temporary credentials that gate a driver device."""

    def __init__(
        self,
        trips: TripRepository,
        fleet: FleetRepository,
        notifier: NotificationDispatcher,
        *,
        login_url: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.trips = trips
        self.fleet = fleet
        self.notifier = notifier
        self.login_url = login_url
        self.clock = clock

    async def assign_trip(self, driver_number:str, vehicle_number:str) -> TripAssignment:
        driver = await self.fleet.get_driver(driver_number)
        vehicle = await self.fleet.get_vehicle(vehicle_number)
        if driver is None or vehicle is None:
            raise NotFoundError("Driver or Vehicle not found")

        if await self.trips.latest_active_for_driver(driver_number) is not None:
            raise ConflictError(f"Driver {driver_number} already has an active trip")
        if await self.trips.latest_active_for_vehicle(vehicle_number) is not None:
            raise ConflictError(f"Vehicle {vehicle_number} already has an active trip")

        creds = issue_credentials()
        trip = await self.trips.create(
            driver_number=driver_number,
            vehicle_number=vehicle_number,
            temporary_username=creds.username,
            temporary_password_hash=hash_password(creds.password),
            created_at=self.clock(),
        )
        logger.info("Trip assigned", trip_id=trip.id, driver_number=driver_number, vehicle_number=vehicle_number)

        message = (
            f"Trip Assignment\nVehicle: {vehicle_number}\nDriver: {driver.name}\n"
            f"Temporary Username: {creds.username}\nTemporary Password: {creds.password}\n\n"
            f"Login at: {self.login_url}"
        )
        result = await self.notifier.dispatch(driver.phone_number, message)
        if not result.success:
            logger.warning("Trip credentials not delivered", trip_id=trip.id, driver_number=driver_number)

        return TripAssignment(trip=trip, driver=driver, vehicle=vehicle, temporary_password=creds.password)

    async def _require(self, trip_id:int) -> Trip:
        trip = await self.trips.get(trip_id)
        if trip is None:
            raise NotFoundError(f"Trip {trip_id} not found")
        return trip

    async def complete_trip(self, trip_id:int) -> Trip:
        trip = await self._require(trip_id)
        trip = await self.trips.mark_completed(trip, completed_at=self.clock())
        logger.info("Trip completed", trip_id=trip.id)
        return trip

    async def cancel_trip(self, trip_id:int) -> Trip:
        # cancellation shares the COMPLETED state; only the driver notice differs
        trip = await self._require(trip_id)
        trip = await self.trips.mark_completed(trip, completed_at=self.clock())
        logger.info("Trip cancelled", trip_id=trip.id)

        driver = await self.fleet.get_driver(trip.driver_number)
        if driver is None:
            logger.warning("Cancelled trip has no driver on file", trip_id=trip.id, driver_number=trip.driver_number)
            return trip
        message = (
            f"Trip Cancelled\nYour trip assignment has been cancelled.\n"
            f"Vehicle: {trip.vehicle_number}\nDriver: {driver.name}\n\n"
            f"Please contact management for details."
        )
        await self.notifier.dispatch(driver.phone_number, message)
        return trip

    async def resolve_credentials(self, username:str, password:str) -> Optional[Trip]:
        """The ACTIVE trip these temporary credentials belong to, or None."""
        trip = await self.trips.active_by_username(username) if username else None
        if trip is None:
            verify_password(password or "", _UNKNOWN_USER_HASH)
            return None
        password_ok = verify_password(password or "", trip.temporary_password_hash)
        username_ok = hmac.compare_digest(trip.temporary_username.encode("utf-8"), username.encode("utf-8"))
        if not (password_ok and username_ok) or trip.status != TRIP_ACTIVE:
            return None
        return trip

    async def get_trip(self, trip_id:int) -> Trip:
        return await self._require(trip_id)

    async def describe(self, trip:Trip) -> TripView:
        driver = await self.fleet.get_driver(trip.driver_number)
        vehicle = await self.fleet.get_vehicle(trip.vehicle_number)
        return TripView(trip=trip, driver=driver, vehicle=vehicle)

    async def list_trips(self) -> Sequence[TripView]:
        return [await self.describe(t) for t in await self.trips.list()]
