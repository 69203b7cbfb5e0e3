# fleetflow/routes/trip.py
from typing import List, Optional
from fastapi import APIRouter

from fleetflow import crud
from fleetflow.deps import ConfigDep, CurrentSession, DatabaseDep, ManagerSession
from fleetflow.models.enums import TripStatus
from fleetflow.schemas.driver import DriverOut
from fleetflow.schemas.trip import TripCreate, TripOut
from fleetflow.schemas.vehicle import VehicleOut
from fleetflow.services.trips import TripLifecycle
from fleetflow.utils.pagination import validate_paging

router = APIRouter()

@router.get("/trips/", response_model=List[TripOut])
async def get_trips(
    db: DatabaseDep,
    config: ConfigDep,
    current: CurrentSession,
    status: Optional[TripStatus] = None,
    skip: int = 0,
    limit: int = 100,
):
    """Trips, newest first"""
    validate_paging(skip, limit)
    trips = await TripLifecycle(db, config).list_trips(status=status, skip=skip, limit=limit)
    return [TripOut.from_model(t) for t in trips]

@router.get("/trips/available-vehicles", response_model=List[VehicleOut])
async def get_available_vehicles(db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    items = await TripLifecycle(db, config).available_vehicles()
    return [VehicleOut.from_model(v) for v in items]

@router.get("/trips/eligible-drivers", response_model=List[DriverOut])
async def get_eligible_drivers(vehicle_id: str, db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    items = await TripLifecycle(db, config).eligible_drivers(vehicle_id)
    return [DriverOut.from_model(d) for d in items]

@router.get("/trips/{trip_id}", response_model=TripOut)
async def get_trip(trip_id: str, db: DatabaseDep, current: CurrentSession):
    trip = await crud.trip.get_or_raise(db, trip_id)
    return TripOut.from_model(trip)

@router.post("/trips/", response_model=TripOut)
async def create_trip(trip: TripCreate, db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    created = await TripLifecycle(db, config).create(trip)
    return TripOut.from_model(created)

@router.post("/trips/{trip_id}/dispatch", response_model=TripOut)
async def dispatch_trip(trip_id: str, db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    trip = await TripLifecycle(db, config).dispatch(trip_id)
    return TripOut.from_model(trip)

@router.post("/trips/{trip_id}/complete", response_model=TripOut)
async def complete_trip(trip_id: str, db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    trip = await TripLifecycle(db, config).complete(trip_id)
    return TripOut.from_model(trip)

@router.post("/trips/{trip_id}/cancel", response_model=TripOut)
async def cancel_trip(
    trip_id: str, db: DatabaseDep, config: ConfigDep, current: CurrentSession, confirm: bool = False
):
    trip = await TripLifecycle(db, config).cancel(trip_id, confirm=confirm)
    return TripOut.from_model(trip)

@router.delete("/trips/{trip_id}")
async def delete_trip(trip_id: str, db: DatabaseDep, config: ConfigDep, current: ManagerSession):
    await TripLifecycle(db, config).delete(trip_id)
    return {"message": "Trip deleted successfully"}
