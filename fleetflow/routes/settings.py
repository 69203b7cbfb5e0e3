# fleetflow/routes/settings.py
from fastapi import APIRouter

from fleetflow.deps import ConfigDep, CurrentSession, DatabaseDep, ManagerSession
from fleetflow.models.system_config import SystemConfig
from fleetflow.schemas.system_config import SystemConfigUpdate
from fleetflow.services.system_config import settings_provider

router = APIRouter()

@router.get("/settings/", response_model=SystemConfig)
async def get_system_config(config: ConfigDep, current: CurrentSession):
    return config

@router.put("/settings/", response_model=SystemConfig)
async def update_system_config(changes: SystemConfigUpdate, db: DatabaseDep, current: ManagerSession):
    """Apply the given fields over the stored configuration"""
    return await settings_provider.update(db, changes.model_dump(exclude_unset=True), updated_by=current.email)

@router.post("/settings/reset", response_model=SystemConfig)
async def reset_system_config(db: DatabaseDep, current: ManagerSession):
    return await settings_provider.reset(db, updated_by=current.email)
