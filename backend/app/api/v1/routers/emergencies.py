from __future__ import annotations

import json
import shutil
import time
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile

from app.api.v1.dependencies import emergency_service, device_trip
from app.core.config import settings
from app.core.errors import AuthenticationError
from app.domain.entities.trip import Trip
from app.schemas.emergency import (
    AcknowledgeIn,
    EmergencyDetailOut,
    EmergencyOut,
    EmergencyTriggerIn,
    NearbyFacilityOut,
)
from app.services.emergency_service import EmergencyService, EmergencyTrigger

router = APIRouter(prefix="/api/emergency", tags=["emergency"])


def _check_device(trip: Trip | None, driver_number: str, vehicle_number: str) -> None:
    if trip is None:
        return
    if trip.driver_number != driver_number or trip.vehicle_number != vehicle_number:
        raise AuthenticationError("Trip credentials do not match this driver/vehicle")


def _respond(result: EmergencyTrigger, response: Response) -> EmergencyDetailOut:
    response.status_code = 201 if result.created else 200
    return result.to_detail()


@router.post("/trigger", response_model=EmergencyDetailOut)
async def trigger_emergency(
    payload: EmergencyTriggerIn,
    response: Response,
    trip: Trip | None = Depends(device_trip),
    svc: EmergencyService = Depends(emergency_service),
):
    """
    Raise an emergency for a driver/vehicle pair.
    Retries inside the dedup window return the already-active record with 200.
    """
    _check_device(trip, payload.driver_number, payload.vehicle_number)
    result = await svc.trigger(
        payload.driver_number,
        payload.vehicle_number,
        payload.raw_coordinates(),
        video_url=payload.video_url,
        timestamp=payload.timestamp,
    )
    return _respond(result, response)


def _save_video(video: UploadFile) -> str:
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    name = f"emergency-{int(time.time() * 1000)}-{Path(video.filename or 'video').name}"
    with (upload_dir / name).open("wb") as handle:
        shutil.copyfileobj(video.file, handle)
    return f"/uploads/{name}"


@router.post("/trigger/upload", response_model=EmergencyDetailOut)
async def trigger_emergency_upload(
    response: Response,
    driver_number: str = Form(..., alias="driverNumber"),
    vehicle_number: str = Form(..., alias="vehicleNumber"),
    location: str | None = Form(default=None),
    latitude: str | None = Form(default=None),
    longitude: str | None = Form(default=None),
    video: UploadFile | None = File(default=None),
    trip: Trip | None = Depends(device_trip),
    svc: EmergencyService = Depends(emergency_service),
):
    """Multipart variant used by devices that attach the recorded clip."""
    _check_device(trip, driver_number, vehicle_number)

    coordinates = None
    if location:
        try:
            coordinates = json.loads(location)
        except ValueError:
            coordinates = None
    if coordinates is None and (latitude is not None or longitude is not None):
        coordinates = {"latitude": latitude, "longitude": longitude}

    video_url = _save_video(video) if video is not None and video.filename else None
    result = await svc.trigger(driver_number, vehicle_number, coordinates, video_url=video_url)
    return _respond(result, response)


@router.post("/acknowledge", response_model=EmergencyOut)
async def acknowledge_emergency(payload: AcknowledgeIn, svc: EmergencyService = Depends(emergency_service)):
    emergency = await svc.acknowledge(payload.emergency_id)
    return EmergencyOut.model_validate(emergency)


@router.get("/all", response_model=list[EmergencyDetailOut])
async def list_emergencies(svc: EmergencyService = Depends(emergency_service)):
    return [v.to_detail() for v in await svc.list_emergencies()]


@router.get("/nearby-facilities", response_model=list[NearbyFacilityOut])
async def nearby_facilities(
    latitude: str = Query(...),
    longitude: str = Query(...),
    svc: EmergencyService = Depends(emergency_service),
):
    return [NearbyFacilityOut(**f.to_dict()) for f in svc.nearby(latitude, longitude)]
