from fastapi import APIRouter, Depends
from app.api.v1.dependencies import fleet_service
from app.services.fleet_service import FleetService
from app.schemas.fleet import DriverCreate, DriverUpdate, DriverOut, VehicleCreate, VehicleUpdate, VehicleOut

router = APIRouter(prefix="/api", tags=["fleet"])

@router.post("/driver/register", response_model=DriverOut, status_code=201)
async def register_driver(payload: DriverCreate, svc: FleetService = Depends(fleet_service)):
    obj = await svc.register_driver(**payload.model_dump())
    return DriverOut.model_validate(obj)

@router.get("/driver/all", response_model=list[DriverOut])
async def list_drivers(svc: FleetService = Depends(fleet_service)):
    return [DriverOut.model_validate(d) for d in await svc.list_drivers()]

@router.patch("/driver/{driver_number}", response_model=DriverOut)
async def update_driver(driver_number: str, payload: DriverUpdate, svc: FleetService = Depends(fleet_service)):
    obj = await svc.update_driver_contact(driver_number, name=payload.name, phone_number=payload.phone_number)
    return DriverOut.model_validate(obj)

@router.post("/vehicle/register", response_model=VehicleOut, status_code=201)
async def register_vehicle(payload: VehicleCreate, svc: FleetService = Depends(fleet_service)):
    obj = await svc.register_vehicle(**payload.model_dump())
    return VehicleOut.model_validate(obj)

@router.get("/vehicle/all", response_model=list[VehicleOut])
async def list_vehicles(svc: FleetService = Depends(fleet_service)):
    return [VehicleOut.model_validate(v) for v in await svc.list_vehicles()]

@router.patch("/vehicle/{vehicle_number}", response_model=VehicleOut)
async def update_vehicle(vehicle_number: str, payload: VehicleUpdate, svc: FleetService = Depends(fleet_service)):
    obj = await svc.update_vehicle_status(vehicle_number, **payload.model_dump())
    return VehicleOut.model_validate(obj)
