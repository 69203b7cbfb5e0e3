# fleetflow/services/vehicles.py
import logging
import math
from datetime import datetime

from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow import crud
from fleetflow.crud.crud_trip import OPEN_STATUSES
from fleetflow.errors import ValidationError
from fleetflow.models.enums import MaintenanceStatus, TripStatus, VehicleStatus, VehicleType, normalize_token
from fleetflow.models.system_config import SystemConfig
from fleetflow.models.vehicle import VehicleModel
from fleetflow.schemas.vehicle import VehicleCreate, VehicleUpdate
from fleetflow.services.transitions import derive_vehicle_status

logger = logging.getLogger(__name__)


def _parse_type(value: str) -> VehicleType:
    try:
        return VehicleType(normalize_token(value))
    except ValueError:
        raise ValidationError(
            message="Invalid vehicle type",
            details=f"'{value}' is not a supported vehicle type",
            example="truck, van, bike or car",
        )


def _validate_fields(vehicle_in: VehicleCreate) -> None:
    if not vehicle_in.name.strip() or not vehicle_in.license_plate.strip() or not vehicle_in.type.strip():
        raise ValidationError("Please fill out all required fields.")
    if not math.isfinite(vehicle_in.capacity) or vehicle_in.capacity <= 0:
        raise ValidationError("Capacity must be a positive number.")
    if vehicle_in.odometer is not None and vehicle_in.odometer < 0:
        raise ValidationError("Odometer cannot be a negative number.")


async def _ensure_unique_plate(db: AsyncIOMotorDatabase, plate: str, exclude_id: str = "") -> None:
    existing = await crud.vehicle.get_by_license_plate(db, license_plate=plate)
    if existing and existing.id != exclude_id:
        raise ValidationError(
            message="License plate already registered",
            details=f"License plate '{plate}' is already assigned to another vehicle",
            example="Each vehicle must have a unique license plate",
        )


async def register_vehicle(
    db: AsyncIOMotorDatabase, config: SystemConfig, vehicle_in: VehicleCreate
) -> VehicleModel:
    _validate_fields(vehicle_in)
    vehicle_type = _parse_type(vehicle_in.type)
    plate = vehicle_in.license_plate.strip().upper()
    await _ensure_unique_plate(db, plate)

    vehicle = await crud.vehicle.create(db, obj_in={
        "name": vehicle_in.name.strip(),
        "model": vehicle_in.model.strip(),
        "license_plate": plate,
        "type": vehicle_type,
        "capacity": vehicle_in.capacity,
        "odometer": vehicle_in.odometer or 0,
        "region": (vehicle_in.region or "").strip() or config.default_region,
        "current_load": 0,
        "acquisition_cost": vehicle_in.acquisition_cost,
        "status": VehicleStatus.available,
        "created_at": datetime.utcnow(),
    })
    logger.info("Vehicle %s registered (%s)", vehicle.id, plate)
    return vehicle


async def edit_vehicle(db: AsyncIOMotorDatabase, vehicle_id: str, vehicle_in: VehicleUpdate) -> VehicleModel:
    vehicle = await crud.vehicle.get_or_raise(db, vehicle_id)
    _validate_fields(vehicle_in)
    vehicle_type = _parse_type(vehicle_in.type)
    plate = vehicle_in.license_plate.strip().upper()
    await _ensure_unique_plate(db, plate, exclude_id=vehicle.id)

    dispatched = await crud.trip.count_for_vehicle(db, vehicle.id, [TripStatus.dispatched.value])
    if vehicle_in.out_of_service:
        if dispatched:
            raise ValidationError(
                message="Vehicle on trip",
                details=f"{vehicle.name} has a dispatched trip and cannot be taken out of service",
                example="Complete or cancel the trip first",
            )
        status = VehicleStatus.out_of_service
    elif vehicle.status == VehicleStatus.out_of_service:
        open_logs = await crud.maintenance_log.get_open_for_vehicle(db, vehicle.id)
        status = derive_vehicle_status(
            VehicleStatus.available, open_maintenance=len(open_logs), dispatched_trips=dispatched
        )
    else:
        status = vehicle.status

    values = {
        "name": vehicle_in.name.strip(),
        "model": vehicle_in.model.strip(),
        "license_plate": plate,
        "type": vehicle_type,
        "capacity": vehicle_in.capacity,
        "odometer": vehicle_in.odometer if vehicle_in.odometer is not None else vehicle.odometer,
        "region": (vehicle_in.region or "").strip() or vehicle.region,
        "acquisition_cost": vehicle_in.acquisition_cost,
        "status": status,
        "updated_at": datetime.utcnow(),
    }
    await crud.vehicle.update(db, vehicle.id, values=values)
    logger.info("Vehicle %s updated (status %s)", vehicle.id, status.value)
    return vehicle.model_copy(update=values)


async def delete_vehicle(db: AsyncIOMotorDatabase, vehicle_id: str) -> None:
    vehicle = await crud.vehicle.get_or_raise(db, vehicle_id)
    open_trips = await crud.trip.count_for_vehicle(db, vehicle.id, OPEN_STATUSES)
    open_logs = await crud.maintenance_log.count(
        db, {"vehicle_id": vehicle.id, "status": MaintenanceStatus.in_progress.value}
    )
    if open_trips or open_logs:
        raise ValidationError(
            message="Vehicle in use",
            details="Cannot delete a vehicle with open trips or maintenance",
            example="Close or cancel them first",
        )
    await crud.vehicle.remove(db, vehicle.id)
    logger.warning("Vehicle %s (%s) deleted", vehicle.id, vehicle.license_plate)
