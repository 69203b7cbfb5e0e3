# fleetflow/services/drivers.py
import logging
from datetime import date, datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow import crud
from fleetflow.errors import ValidationError
from fleetflow.models.driver import DriverModel
from fleetflow.models.enums import DriverCategory, DriverStatus, TripStatus, normalize_token
from fleetflow.models.system_config import SystemConfig
from fleetflow.schemas.driver import DriverCreate, DriverPerformance, DriverUpdate
from fleetflow.services.compliance import sweep_driver

logger = logging.getLogger(__name__)


def _clean(driver_in: DriverCreate) -> dict:
    name = driver_in.name.strip()
    license_number = driver_in.license_number.strip()
    if not name or not license_number:
        raise ValidationError("Please fill all required fields.")
    try:
        category = DriverCategory(normalize_token(driver_in.category))
    except ValueError:
        raise ValidationError(
            message="Invalid category",
            details=f"'{driver_in.category}' is not a driver category",
            example="truck, van or bike",
        )
    try:
        status = DriverStatus(normalize_token(driver_in.status))
    except ValueError:
        raise ValidationError(
            message="Invalid status",
            details=f"'{driver_in.status}' is not a driver status",
            example="available, on duty, off duty or suspended",
        )
    return {
        "name": name,
        "license_number": license_number,
        "license_expiry": driver_in.license_expiry,
        "category": category,
        "status": status,
    }


async def _ensure_unique_license(db: AsyncIOMotorDatabase, license_number: str, exclude_id: str = "") -> None:
    existing = await crud.driver.get_by_license(db, license_number=license_number)
    if existing and existing.id != exclude_id:
        raise ValidationError(
            message="License number already registered",
            details=f"Driver with license number '{license_number}' already exists",
            example="Please provide a unique license number",
        )


async def create_driver(
    db: AsyncIOMotorDatabase, config: SystemConfig, driver_in: DriverCreate, today: Optional[date] = None
) -> DriverModel:
    values = _clean(driver_in)
    await _ensure_unique_license(db, values["license_number"])
    now = datetime.utcnow()
    driver = await crud.driver.create(db, obj_in={**values, "created_at": now, "updated_at": now})
    logger.info("Driver %s added (%s)", driver.id, driver.name)
    return await sweep_driver(db, config, driver, today)


async def update_driver(
    db: AsyncIOMotorDatabase, config: SystemConfig, driver_id: str, driver_in: DriverUpdate,
    today: Optional[date] = None
) -> DriverModel:
    driver = await crud.driver.get_or_raise(db, driver_id)
    values = _clean(driver_in)
    await _ensure_unique_license(db, values["license_number"], exclude_id=driver.id)
    values["updated_at"] = datetime.utcnow()
    await crud.driver.update(db, driver.id, values=values)
    logger.info("Driver %s updated", driver.id)
    return await sweep_driver(db, config, driver.model_copy(update=values), today)


async def delete_driver(db: AsyncIOMotorDatabase, driver_id: str) -> None:
    driver = await crud.driver.get_or_raise(db, driver_id)
    if await crud.trip.count_open_for_driver(db, driver.id):
        raise ValidationError(
            message="Driver assigned",
            details="Cannot delete a driver assigned to an open trip",
            example="Complete or cancel the trip first",
        )
    await crud.driver.remove(db, driver.id)
    logger.warning("Driver %s (%s) deleted", driver.id, driver.name)


async def driver_performance(db: AsyncIOMotorDatabase, today: Optional[date] = None) -> List[DriverPerformance]:
    today = today or date.today()
    drivers = await crud.driver.get_multi(db, sort=[("name", 1)])
    trips = await crud.trip.get_multi(db, query={"driver_id": {"$ne": None}})

    performance = []
    for d in drivers:
        driver_trips = [t for t in trips if t.driver_id == d.id]
        completed = len([t for t in driver_trips if t.status == TripStatus.completed])
        total = len(driver_trips)
        performance.append(DriverPerformance(
            id=d.id,
            name=d.name,
            category=d.category,
            status=d.status,
            total_trips=total,
            completed_trips=completed,
            completion_rate=round(completed / total * 100) if total else 0,
            license_expired=d.license_expired(today),
        ))
    return performance
