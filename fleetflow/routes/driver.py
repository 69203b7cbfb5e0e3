# fleetflow/routes/driver.py
from typing import List, Optional
from fastapi import APIRouter

from fleetflow import crud
from fleetflow.deps import ConfigDep, CurrentSession, DatabaseDep, ManagerSession
from fleetflow.models.enums import DriverStatus
from fleetflow.schemas.driver import DriverCreate, DriverUpdate, DriverOut, DriverPerformance
from fleetflow.services import drivers
from fleetflow.services.compliance import run_compliance_sweep
from fleetflow.utils.pagination import validate_paging

router = APIRouter()

@router.post("/drivers/", response_model=DriverOut)
async def create_driver(driver: DriverCreate, db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    created = await drivers.create_driver(db, config, driver)
    return DriverOut.from_model(created)

@router.get("/drivers/", response_model=List[DriverOut])
async def get_drivers(
    db: DatabaseDep,
    current: CurrentSession,
    status: Optional[DriverStatus] = None,
    skip: int = 0,
    limit: int = 100,
):
    validate_paging(skip, limit)
    query = {"status": status} if status else {}
    items = await crud.driver.get_multi(db, query=query, sort=[("name", 1)], skip=skip, limit=limit)
    return [DriverOut.from_model(d) for d in items]

# declared before /drivers/{driver_id} so the path is not taken for an id
@router.get("/drivers/performance", response_model=List[DriverPerformance])
async def get_driver_performance(db: DatabaseDep, current: CurrentSession):
    return await drivers.driver_performance(db)

@router.post("/drivers/compliance-sweep")
async def sweep_drivers(db: DatabaseDep, config: ConfigDep, current: CurrentSession):
    """Suspend every driver whose license has expired."""
    suspended = await run_compliance_sweep(db, config)
    return {"suspended": suspended, "count": len(suspended)}

@router.get("/drivers/{driver_id}", response_model=DriverOut)
async def get_driver(driver_id: str, db: DatabaseDep, current: CurrentSession):
    driver = await crud.driver.get_or_raise(db, driver_id)
    return DriverOut.from_model(driver)

@router.put("/drivers/{driver_id}", response_model=DriverOut)
async def update_driver(
    driver_id: str, driver: DriverUpdate, db: DatabaseDep, config: ConfigDep, current: CurrentSession
):
    updated = await drivers.update_driver(db, config, driver_id, driver)
    return DriverOut.from_model(updated)

@router.delete("/drivers/{driver_id}")
async def delete_driver(driver_id: str, db: DatabaseDep, current: ManagerSession):
    await drivers.delete_driver(db, driver_id)
    return {"message": "Driver deleted successfully"}
