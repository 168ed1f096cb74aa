from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import timedelta
from app.core.config import settings
from app.core.errors import AuthenticationError
from app.domain.entities.trip import Trip
from app.infrastructure.db.session import get_session
from app.infrastructure.realtime.hub import ConnectionHub, get_broadcaster
from app.infrastructure.repositories.emergency_repo_sql import SQLEmergencyRepository
from app.infrastructure.repositories.fleet_repo_sql import SQLFleetRepository
from app.infrastructure.repositories.trip_repo_sql import SQLTripRepository
from app.notifications.factory import get_sms_provider
from app.services.emergency_service import EmergencyService
from app.services.fleet_service import FleetService
from app.services.notification_service import NotificationDispatcher
from app.services.trip_service import TripService

def notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(get_sms_provider())

def fleet_service(session: AsyncSession = Depends(get_session)) -> FleetService:
    return FleetService(SQLFleetRepository(session))

def trip_service(
    session: AsyncSession = Depends(get_session),
    notifier: NotificationDispatcher = Depends(notification_dispatcher),
) -> TripService:
    return TripService(
        SQLTripRepository(session),
        SQLFleetRepository(session),
        notifier,
        login_url=settings.public_base_url.rstrip("/") + "/login/driver",
    )

def emergency_service(
    session: AsyncSession = Depends(get_session),
    notifier: NotificationDispatcher = Depends(notification_dispatcher),
    broadcaster: ConnectionHub = Depends(get_broadcaster),
) -> EmergencyService:
    return EmergencyService(
        SQLEmergencyRepository(session),
        SQLFleetRepository(session),
        broadcaster,
        notifier,
        police_phone=settings.police_phone,
        hospital_phone=settings.hospital_phone,
        dedup_window=timedelta(seconds=settings.emergency_dedup_window_seconds),
        facility_radius_km=settings.facility_radius_km,
    )

async def device_trip(
    x_trip_username: str | None = Header(default=None),
    x_trip_password: str | None = Header(default=None),
    trips: TripService = Depends(trip_service),
) -> Trip | None:
    """The caller's ACTIVE trip when trigger gating is enabled, else None."""
    if not settings.require_trip_credentials:
        return None
    trip = await trips.resolve_credentials(x_trip_username or "", x_trip_password or "")
    if trip is None:
        raise AuthenticationError("Invalid temporary credentials or trip expired")
    return trip
