# fleetflow/services/fuel.py
import logging
from datetime import date, datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow import crud
from fleetflow.models.fuel import FuelLogModel
from fleetflow.schemas.fuel import FuelLogCreate

logger = logging.getLogger(__name__)


async def list_logs(db: AsyncIOMotorDatabase, vehicle_id: Optional[str] = None) -> List[FuelLogModel]:
    query = {"vehicle_id": vehicle_id} if vehicle_id else {}
    return await crud.fuel_log.get_multi(db, query=query, sort=[("date", -1), ("created_at", -1)])


async def create_log(db: AsyncIOMotorDatabase, log_in: FuelLogCreate) -> FuelLogModel:
    vehicle = await crud.vehicle.get_or_raise(db, log_in.vehicle_id)
    log = await crud.fuel_log.create(db, obj_in={
        "vehicle_id": vehicle.id,
        "vehicle_name": vehicle.name,
        "liters": log_in.liters,
        "cost": log_in.cost,
        "date": log_in.date or date.today(),
        "created_at": datetime.utcnow(),
    })
    logger.info("Fuel log %s recorded for vehicle %s (%.1f l)", log.id, vehicle.id, log.liters)
    return log


async def delete_log(db: AsyncIOMotorDatabase, log_id: str) -> None:
    log = await crud.fuel_log.get_or_raise(db, log_id)
    await crud.fuel_log.remove(db, log.id)
    logger.warning("Fuel log %s deleted", log.id)
