# fleetflow/routes/vehicle.py
from typing import List, Optional
from fastapi import APIRouter

from fleetflow import crud
from fleetflow.deps import ConfigDep, CurrentSession, DatabaseDep, ManagerSession
from fleetflow.models.enums import VehicleStatus
from fleetflow.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleOut
from fleetflow.services import vehicles
from fleetflow.utils.pagination import validate_paging

router = APIRouter()

@router.post("/vehicles/", response_model=VehicleOut)
async def create_vehicle(
    vehicle: VehicleCreate, db: DatabaseDep, config: ConfigDep, current: CurrentSession
):
    created = await vehicles.register_vehicle(db, config, vehicle)
    return VehicleOut.from_model(created)

@router.get("/vehicles/", response_model=List[VehicleOut])
async def get_vehicles(
    db: DatabaseDep,
    current: CurrentSession,
    status: Optional[VehicleStatus] = None,
    skip: int = 0,
    limit: int = 100,
):
    validate_paging(skip, limit)
    query = {"status": status} if status else {}
    items = await crud.vehicle.get_multi(db, query=query, sort=[("name", 1)], skip=skip, limit=limit)
    return [VehicleOut.from_model(v) for v in items]

@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
async def get_vehicle(vehicle_id: str, db: DatabaseDep, current: CurrentSession):
    vehicle = await crud.vehicle.get_or_raise(db, vehicle_id)
    return VehicleOut.from_model(vehicle)

@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut)
async def update_vehicle(vehicle_id: str, vehicle: VehicleUpdate, db: DatabaseDep, current: CurrentSession):
    updated = await vehicles.edit_vehicle(db, vehicle_id, vehicle)
    return VehicleOut.from_model(updated)

@router.delete("/vehicles/{vehicle_id}")
async def delete_vehicle(vehicle_id: str, db: DatabaseDep, current: ManagerSession):
    await vehicles.delete_vehicle(db, vehicle_id)
    return {"message": "Vehicle deleted successfully"}
