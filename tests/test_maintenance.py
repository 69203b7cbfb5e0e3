from datetime import datetime, timedelta

import pytest

from fleetflow import crud
from fleetflow.errors import NotFoundError, OperationFailed, ValidationError
from fleetflow.models.enums import MaintenanceStatus, ServiceType, TripStatus, VehicleStatus
from fleetflow.schemas.maintenance import MaintenanceLogCreate
from fleetflow.services import maintenance


def log_request(vehicle, **overrides):
    values = {"vehicle_id": vehicle.id, "service_type": "Repair", "description": "Oil leak", "cost": 180}
    values.update(overrides)
    return MaintenanceLogCreate(**values)


@pytest.mark.asyncio
async def test_open_then_close_scenario(db, make_vehicle):
    vehicle = await make_vehicle(name="V1")

    log = await maintenance.open_log(db, log_request(vehicle))

    assert log.status == MaintenanceStatus.in_progress
    assert log.service_type == ServiceType.repair
    assert log.vehicle_name == "V1"
    assert (await crud.vehicle.get(db, vehicle.id)).status == VehicleStatus.in_shop

    closed = await maintenance.close_log(db, log.id)

    assert closed.status == MaintenanceStatus.completed
    assert closed.completed_at is not None
    assert (await crud.vehicle.get(db, vehicle.id)).status == VehicleStatus.available

@pytest.mark.asyncio
async def test_open_rejects_vehicle_already_in_shop(db, make_vehicle):
    vehicle = await make_vehicle(status=VehicleStatus.in_shop)
    with pytest.raises(ValidationError) as exc_info:
        await maintenance.open_log(db, log_request(vehicle))
    assert exc_info.value.message == "Vehicle already in shop"
    assert await crud.maintenance_log.count(db) == 0

@pytest.mark.asyncio
async def test_open_rejects_unknown_vehicle(db):
    request = MaintenanceLogCreate(
        vehicle_id="507f1f77bcf86cd799439011", service_type="repair", description="x", cost=1
    )
    with pytest.raises(NotFoundError):
        await maintenance.open_log(db, request)

@pytest.mark.asyncio
async def test_open_rejects_unknown_service_type(db, make_vehicle):
    vehicle = await make_vehicle()
    with pytest.raises(ValidationError) as exc_info:
        await maintenance.open_log(db, log_request(vehicle, service_type="paint job"))
    assert exc_info.value.message == "Invalid service type"

def test_negative_cost_rejected_by_schema():
    with pytest.raises(ValueError):
        MaintenanceLogCreate(vehicle_id="x", service_type="repair", description="x", cost=-5)

def test_nan_cost_rejected_by_schema():
    with pytest.raises(ValueError):
        MaintenanceLogCreate(vehicle_id="x", service_type="repair", description="x", cost=float("nan"))

@pytest.mark.asyncio
async def test_close_twice_is_invalid(db, make_vehicle):
    vehicle = await make_vehicle()
    log = await maintenance.open_log(db, log_request(vehicle))
    await maintenance.close_log(db, log.id)

    with pytest.raises(ValidationError) as exc_info:
        await maintenance.close_log(db, log.id)
    assert exc_info.value.message == "Invalid transition"

@pytest.mark.asyncio
async def test_close_keeps_out_of_service_vehicle_out(db, make_vehicle, make_maintenance):
    vehicle = await make_vehicle(status=VehicleStatus.out_of_service)
    log = await make_maintenance(vehicle)

    await maintenance.close_log(db, log.id)

    assert (await crud.vehicle.get(db, vehicle.id)).status == VehicleStatus.out_of_service

@pytest.mark.asyncio
async def test_close_returns_vehicle_to_trip_it_is_on(db, make_vehicle, make_maintenance, make_trip):
    vehicle = await make_vehicle(status=VehicleStatus.in_shop)
    log = await make_maintenance(vehicle)
    await make_trip(vehicle, status=TripStatus.dispatched)

    await maintenance.close_log(db, log.id)

    assert (await crud.vehicle.get(db, vehicle.id)).status == VehicleStatus.on_trip

@pytest.mark.asyncio
async def test_deleting_open_log_releases_vehicle(db, make_vehicle):
    vehicle = await make_vehicle()
    log = await maintenance.open_log(db, log_request(vehicle))

    await maintenance.delete_log(db, log.id)

    assert await crud.maintenance_log.get(db, log.id) is None
    assert (await crud.vehicle.get(db, vehicle.id)).status == VehicleStatus.available

@pytest.mark.asyncio
async def test_open_failure_removes_new_log(db, make_vehicle, monkeypatch):
    vehicle = await make_vehicle()

    async def failing_update(db, id, *, values):
        raise OperationFailed("Failed to update vehicle", details="write concern timeout")

    monkeypatch.setattr(crud.vehicle, "update", failing_update)

    with pytest.raises(OperationFailed) as exc_info:
        await maintenance.open_log(db, log_request(vehicle))

    assert exc_info.value.compensated is True
    assert await crud.maintenance_log.count(db) == 0

@pytest.mark.asyncio
async def test_list_is_newest_first(db, make_vehicle, make_maintenance):
    vehicle = await make_vehicle()
    older = await make_maintenance(vehicle, created_at=datetime.utcnow() - timedelta(days=2))
    newer = await make_maintenance(vehicle, status=MaintenanceStatus.completed)

    logs = await maintenance.list_logs(db)
    assert [log.id for log in logs] == [newer.id, older.id]
