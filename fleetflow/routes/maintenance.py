# fleetflow/routes/maintenance.py
from typing import List
from fastapi import APIRouter

from fleetflow.deps import CurrentSession, DatabaseDep, ManagerSession
from fleetflow.schemas.maintenance import MaintenanceLogCreate, MaintenanceLogOut
from fleetflow.services import maintenance

router = APIRouter()

@router.get("/maintenance/", response_model=List[MaintenanceLogOut])
async def get_maintenance_logs(db: DatabaseDep, current: CurrentSession):
    logs = await maintenance.list_logs(db)
    return [MaintenanceLogOut.from_model(log) for log in logs]

@router.post("/maintenance/", response_model=MaintenanceLogOut)
async def create_maintenance_log(log: MaintenanceLogCreate, db: DatabaseDep, current: CurrentSession):
    """Open a service record; the vehicle goes to the shop."""
    created = await maintenance.open_log(db, log)
    return MaintenanceLogOut.from_model(created)

@router.post("/maintenance/{log_id}/complete", response_model=MaintenanceLogOut)
async def complete_maintenance_log(log_id: str, db: DatabaseDep, current: CurrentSession):
    log = await maintenance.close_log(db, log_id)
    return MaintenanceLogOut.from_model(log)

@router.delete("/maintenance/{log_id}")
async def delete_maintenance_log(log_id: str, db: DatabaseDep, current: ManagerSession):
    await maintenance.delete_log(db, log_id)
    return {"message": "Maintenance log deleted successfully"}
