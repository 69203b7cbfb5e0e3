# fleetflow/deps.py
from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow.config import get_settings
from fleetflow.database import get_database
from fleetflow.errors import PermissionDenied
from fleetflow.models.system_config import SystemConfig
from fleetflow.schemas.user import SessionInfo
from fleetflow.services import auth
from fleetflow.services.system_config import settings_provider

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{get_settings().API_PREFIX}/auth/login"
)

DatabaseDep = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
TokenDep = Annotated[str, Depends(reusable_oauth2)]


async def get_config(db: DatabaseDep) -> SystemConfig:
    # rules are read fresh for every request so edits apply immediately
    return await settings_provider.load(db)


ConfigDep = Annotated[SystemConfig, Depends(get_config)]


async def get_current_session(db: DatabaseDep, token: TokenDep) -> SessionInfo:
    return await auth.resolve_session(db, token)


CurrentSession = Annotated[SessionInfo, Depends(get_current_session)]


async def get_current_manager(current: CurrentSession) -> SessionInfo:
    if not current.is_manager:
        raise PermissionDenied(
            message="Manager role required",
            details="The user doesn't have enough privileges",
        )
    return current


ManagerSession = Annotated[SessionInfo, Depends(get_current_manager)]
