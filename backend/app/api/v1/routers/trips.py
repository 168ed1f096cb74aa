from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import trip_service
from app.core.errors import AuthenticationError
from app.schemas.fleet import DriverOut, VehicleOut
from app.schemas.trip import TripAssignIn, TripIdIn, TripOut, TripAssignmentOut, DriverLoginIn
from app.services.trip_service import TripService, TripView

router = APIRouter(prefix="/api", tags=["trips"])

INVALID_CREDENTIALS = "Invalid temporary credentials or trip expired"


def trip_out(view: TripView) -> TripOut:
    return TripOut.model_validate(view.trip).model_copy(update={
        "driver": DriverOut.model_validate(view.driver) if view.driver else None,
        "vehicle": VehicleOut.model_validate(view.vehicle) if view.vehicle else None,
    })


async def _resolve(svc: TripService, username: str, password: str) -> TripOut:
    trip = await svc.resolve_credentials(username, password)
    if trip is None:
        raise AuthenticationError(INVALID_CREDENTIALS)
    return trip_out(await svc.describe(trip))


@router.post("/trips/assign", response_model=TripAssignmentOut)
async def assign_trip(payload: TripAssignIn, svc: TripService = Depends(trip_service)):
    """Pair a driver with a vehicle and text the driver one-time login credentials."""
    assignment = await svc.assign_trip(payload.driver_number, payload.vehicle_number)
    base = trip_out(assignment)
    return TripAssignmentOut(**base.model_dump(), temporary_password=assignment.temporary_password)


@router.post("/trips/complete", response_model=TripOut)
async def complete_trip(payload: TripIdIn, svc: TripService = Depends(trip_service)):
    trip = await svc.complete_trip(payload.trip_id)
    return trip_out(await svc.describe(trip))


@router.post("/trips/cancel", response_model=TripOut)
async def cancel_trip(payload: TripIdIn, svc: TripService = Depends(trip_service)):
    trip = await svc.cancel_trip(payload.trip_id)
    return trip_out(await svc.describe(trip))


@router.get("/trips", response_model=list[TripOut])
async def list_trips(svc: TripService = Depends(trip_service)):
    return [trip_out(v) for v in await svc.list_trips()]


@router.get("/trips/current", response_model=TripOut)
async def current_trip(
    temporary_username: str = Query(..., alias="temporaryUsername"),
    temporary_password: str = Query(..., alias="temporaryPassword"),
    svc: TripService = Depends(trip_service),
):
    return await _resolve(svc, temporary_username, temporary_password)


@router.post("/auth/driver/login", response_model=TripOut)
async def driver_login(payload: DriverLoginIn, svc: TripService = Depends(trip_service)):
    return await _resolve(svc, payload.temporary_username, payload.temporary_password)
