import pytest

from fleetflow import crud
from fleetflow.errors import ValidationError
from fleetflow.models.enums import TripStatus, VehicleStatus, VehicleType
from fleetflow.schemas.vehicle import VehicleCreate, VehicleUpdate
from fleetflow.services import vehicles


def new_vehicle(**overrides):
    values = {"name": "Sprinter", "model": "316", "license_plate": "van-42", "type": "Van", "capacity": 1200}
    values.update(overrides)
    return VehicleCreate(**values)


def edit_of(vehicle, **overrides):
    values = {
        "name": vehicle.name,
        "model": vehicle.model,
        "license_plate": vehicle.license_plate,
        "type": vehicle.type.value,
        "capacity": vehicle.capacity,
        "odometer": vehicle.odometer,
        "region": vehicle.region,
        "out_of_service": vehicle.status == VehicleStatus.out_of_service,
    }
    values.update(overrides)
    return VehicleUpdate(**values)


@pytest.mark.asyncio
async def test_register_normalizes_and_defaults(db, config):
    vehicle = await vehicles.register_vehicle(db, config, new_vehicle())

    assert vehicle.license_plate == "VAN-42"
    assert vehicle.type == VehicleType.van
    assert vehicle.odometer == 0
    assert vehicle.region == "Central Hub"
    assert vehicle.status == VehicleStatus.available

@pytest.mark.asyncio
async def test_register_rejects_duplicate_plate_case_insensitively(db, config):
    await vehicles.register_vehicle(db, config, new_vehicle())
    with pytest.raises(ValidationError) as exc_info:
        await vehicles.register_vehicle(db, config, new_vehicle(license_plate="VAN-42 "))
    assert exc_info.value.message == "License plate already registered"

@pytest.mark.asyncio
@pytest.mark.parametrize("overrides,message", [
    ({"capacity": 0}, "Capacity must be a positive number."),
    ({"name": "   "}, "Please fill out all required fields."),
    ({"type": "boat"}, "Invalid vehicle type"),
    ({"odometer": -1}, "Odometer cannot be a negative number."),
])
async def test_register_validation(db, config, overrides, message):
    with pytest.raises(ValidationError) as exc_info:
        await vehicles.register_vehicle(db, config, new_vehicle(**overrides))
    assert exc_info.value.message == message
    assert await crud.vehicle.count(db) == 0

@pytest.mark.parametrize("field", ["capacity", "odometer", "acquisition_cost"])
def test_non_finite_numbers_rejected_by_schema(field):
    with pytest.raises(ValueError):
        new_vehicle(**{field: float("nan")})

@pytest.mark.asyncio
async def test_register_refuses_nan_capacity(db, config):
    request = new_vehicle().model_copy(update={"capacity": float("nan")})
    with pytest.raises(ValidationError) as exc_info:
        await vehicles.register_vehicle(db, config, request)
    assert exc_info.value.message == "Capacity must be a positive number."
    assert await crud.vehicle.count(db) == 0

@pytest.mark.asyncio
async def test_edit_updates_fields_and_keeps_status(db, make_vehicle):
    vehicle = await make_vehicle(status=VehicleStatus.on_trip)

    updated = await vehicles.edit_vehicle(db, vehicle.id, edit_of(vehicle, odometer=15000, license_plate="trk-9"))

    stored = await crud.vehicle.get(db, vehicle.id)
    assert stored.odometer == 15000
    assert stored.license_plate == "TRK-9"
    assert stored.status == VehicleStatus.on_trip
    assert updated.status == VehicleStatus.on_trip

@pytest.mark.asyncio
async def test_edit_plate_must_stay_unique(db, make_vehicle):
    first = await make_vehicle(license_plate="AAA-1")
    await make_vehicle(license_plate="BBB-2")

    with pytest.raises(ValidationError):
        await vehicles.edit_vehicle(db, first.id, edit_of(first, license_plate="bbb-2"))
    # keeping its own plate is fine
    await vehicles.edit_vehicle(db, first.id, edit_of(first, name="Renamed"))

@pytest.mark.asyncio
async def test_out_of_service_toggle_round_trip(db, make_vehicle, make_maintenance):
    vehicle = await make_vehicle()

    await vehicles.edit_vehicle(db, vehicle.id, edit_of(vehicle, out_of_service=True))
    assert (await crud.vehicle.get(db, vehicle.id)).status == VehicleStatus.out_of_service

    await make_maintenance(vehicle)
    stored = await crud.vehicle.get(db, vehicle.id)
    await vehicles.edit_vehicle(db, vehicle.id, edit_of(stored, out_of_service=False))
    assert (await crud.vehicle.get(db, vehicle.id)).status == VehicleStatus.in_shop

@pytest.mark.asyncio
async def test_out_of_service_rejected_while_dispatched(db, make_vehicle, make_trip):
    vehicle = await make_vehicle(status=VehicleStatus.on_trip)
    await make_trip(vehicle, status=TripStatus.dispatched)

    with pytest.raises(ValidationError) as exc_info:
        await vehicles.edit_vehicle(db, vehicle.id, edit_of(vehicle, out_of_service=True))
    assert exc_info.value.message == "Vehicle on trip"

@pytest.mark.asyncio
async def test_delete_refused_with_open_records(db, make_vehicle, make_trip, make_maintenance):
    busy = await make_vehicle(license_plate="BUSY-1")
    await make_trip(busy)
    shop = await make_vehicle(license_plate="SHOP-1", status=VehicleStatus.in_shop)
    await make_maintenance(shop)
    idle = await make_vehicle(license_plate="IDLE-1")
    await make_trip(idle, status=TripStatus.completed)

    for vehicle in (busy, shop):
        with pytest.raises(ValidationError) as exc_info:
            await vehicles.delete_vehicle(db, vehicle.id)
        assert exc_info.value.message == "Vehicle in use"

    await vehicles.delete_vehicle(db, idle.id)
    assert await crud.vehicle.get(db, idle.id) is None
