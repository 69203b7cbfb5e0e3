# fleetflow/services/maintenance.py
import logging
from datetime import datetime
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow import crud
from fleetflow.errors import ValidationError
from fleetflow.models.enums import MaintenanceStatus, ServiceType, TripStatus, VehicleStatus, normalize_token
from fleetflow.models.maintenance import MaintenanceLogModel
from fleetflow.models.vehicle import VehicleModel
from fleetflow.schemas.maintenance import MaintenanceLogCreate
from fleetflow.services.transitions import derive_vehicle_status, ensure_maintenance_transition
from fleetflow.services.writes import WriteSequence

logger = logging.getLogger(__name__)


async def list_logs(db: AsyncIOMotorDatabase) -> List[MaintenanceLogModel]:
    return await crud.maintenance_log.get_multi(db, sort=[("created_at", -1)])


async def _vehicle_status_without(
    db: AsyncIOMotorDatabase, vehicle: VehicleModel, log_id: str
) -> VehicleStatus:
    other_logs = await crud.maintenance_log.get_open_for_vehicle(db, vehicle.id, exclude_log_id=log_id)
    dispatched = await crud.trip.count_for_vehicle(db, vehicle.id, [TripStatus.dispatched.value])
    return derive_vehicle_status(
        vehicle.status, open_maintenance=len(other_logs), dispatched_trips=dispatched
    )


async def open_log(db: AsyncIOMotorDatabase, log_in: MaintenanceLogCreate) -> MaintenanceLogModel:
    try:
        service_type = ServiceType(normalize_token(log_in.service_type))
    except ValueError:
        raise ValidationError(
            message="Invalid service type",
            details=f"'{log_in.service_type}' is not a known service type",
            example="preventative or repair",
        )
    description = log_in.description.strip()
    if not description:
        raise ValidationError("Please fill all fields.", details="A description is required")

    vehicle = await crud.vehicle.get_or_raise(db, log_in.vehicle_id)
    if vehicle.status == VehicleStatus.in_shop:
        raise ValidationError(
            message="Vehicle already in shop",
            details=f"{vehicle.name} already has open maintenance",
            example="Complete the open maintenance first",
        )

    writes = WriteSequence(db, "open maintenance")
    created = writes.create(crud.maintenance_log, {
        "vehicle_id": vehicle.id,
        "vehicle_name": vehicle.name,
        "service_type": service_type,
        "description": description,
        "cost": log_in.cost,
        "status": MaintenanceStatus.in_progress,
        "created_at": datetime.utcnow(),
        "completed_at": None,
    })
    writes.update(crud.vehicle, vehicle, {"status": VehicleStatus.in_shop})
    await writes.commit()

    logger.info("Maintenance %s opened on vehicle %s", created.created.id, vehicle.id)
    return created.created


async def close_log(db: AsyncIOMotorDatabase, log_id: str) -> MaintenanceLogModel:
    log = await crud.maintenance_log.get_or_raise(db, log_id)
    ensure_maintenance_transition(log.status, MaintenanceStatus.completed)

    values = {"status": MaintenanceStatus.completed, "completed_at": datetime.utcnow()}
    writes = WriteSequence(db, "complete maintenance")
    writes.update(crud.maintenance_log, log, values)

    vehicle = await crud.vehicle.get(db, log.vehicle_id)
    if vehicle:
        writes.update(crud.vehicle, vehicle, {"status": await _vehicle_status_without(db, vehicle, log.id)})
    else:
        logger.warning("Maintenance %s references missing vehicle %s", log.id, log.vehicle_id)
    await writes.commit()

    logger.info("Maintenance %s completed", log.id)
    return log.model_copy(update=values)


async def delete_log(db: AsyncIOMotorDatabase, log_id: str) -> None:
    """Remove a maintenance record; an open one no longer holds its vehicle in the shop."""
    log = await crud.maintenance_log.get_or_raise(db, log_id)
    writes = WriteSequence(db, "delete maintenance")
    writes.remove(crud.maintenance_log, log)
    if log.status == MaintenanceStatus.in_progress:
        vehicle = await crud.vehicle.get(db, log.vehicle_id)
        if vehicle:
            writes.update(crud.vehicle, vehicle, {"status": await _vehicle_status_without(db, vehicle, log.id)})
    await writes.commit()
    logger.warning("Maintenance %s (%s) deleted", log.id, log.status.value)
