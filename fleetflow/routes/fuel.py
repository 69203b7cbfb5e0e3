# fleetflow/routes/fuel.py
from typing import List, Optional
from fastapi import APIRouter

from fleetflow.deps import CurrentSession, DatabaseDep, ManagerSession
from fleetflow.schemas.fuel import FuelLogCreate, FuelLogOut
from fleetflow.services import fuel

router = APIRouter()

@router.get("/fuel-logs/", response_model=List[FuelLogOut])
async def get_fuel_logs(db: DatabaseDep, current: CurrentSession, vehicle_id: Optional[str] = None):
    logs = await fuel.list_logs(db, vehicle_id=vehicle_id)
    return [FuelLogOut.from_model(log) for log in logs]

@router.post("/fuel-logs/", response_model=FuelLogOut)
async def create_fuel_log(log: FuelLogCreate, db: DatabaseDep, current: CurrentSession):
    created = await fuel.create_log(db, log)
    return FuelLogOut.from_model(created)

@router.delete("/fuel-logs/{log_id}")
async def delete_fuel_log(log_id: str, db: DatabaseDep, current: ManagerSession):
    await fuel.delete_log(db, log_id)
    return {"message": "Fuel log deleted successfully"}
