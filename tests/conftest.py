import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

from datetime import date, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from fleetflow import crud
from fleetflow.models.enums import (
    DriverCategory, DriverStatus, MaintenanceStatus, ServiceType, TripStatus,
    UserRole, VehicleStatus, VehicleType,
)
from fleetflow.models.system_config import SystemConfig
from fleetflow.services.auth import hash_password, sign_in

TODAY = date.today()
PASSWORD = "secret123"


# Fixtures
@pytest.fixture
def db():
    client = AsyncMongoMockClient()
    return client["fleetflow_test"]

@pytest.fixture
def config():
    return SystemConfig()

@pytest.fixture
def make_vehicle(db):
    async def _make(**overrides):
        values = {
            "name": "Volvo FH",
            "model": "FH16",
            "license_plate": "TRK-1000",
            "type": VehicleType.truck,
            "capacity": 1000,
            "odometer": 12000,
            "region": "Central Hub",
            "current_load": 0,
            "acquisition_cost": 50000,
            "status": VehicleStatus.available,
            "created_at": datetime.utcnow(),
        }
        values.update(overrides)
        return await crud.vehicle.create(db, obj_in=values)
    return _make

@pytest.fixture
def make_driver(db):
    async def _make(**overrides):
        values = {
            "name": "Alex Driver",
            "license_number": "DL-1000",
            "license_expiry": TODAY + timedelta(days=365),
            "category": DriverCategory.truck,
            "status": DriverStatus.available,
            "created_at": datetime.utcnow(),
        }
        values.update(overrides)
        return await crud.driver.create(db, obj_in=values)
    return _make

@pytest.fixture
def make_trip(db):
    async def _make(vehicle, driver=None, **overrides):
        values = {
            "origin": "Warehouse A",
            "destination": "Depot B",
            "cargo_weight": 500,
            "freight_amount": 250,
            "vehicle_id": vehicle.id,
            "vehicle_name": vehicle.name,
            "driver_id": driver.id if driver else None,
            "driver_name": driver.name if driver else "Unassigned",
            "status": TripStatus.draft,
            "created_at": datetime.utcnow(),
        }
        values.update(overrides)
        return await crud.trip.create(db, obj_in=values)
    return _make

@pytest.fixture
def make_maintenance(db):
    async def _make(vehicle, **overrides):
        values = {
            "vehicle_id": vehicle.id,
            "vehicle_name": vehicle.name,
            "service_type": ServiceType.repair,
            "description": "Brake pads",
            "cost": 300,
            "status": MaintenanceStatus.in_progress,
            "created_at": datetime.utcnow(),
        }
        values.update(overrides)
        return await crud.maintenance_log.create(db, obj_in=values)
    return _make

@pytest.fixture
def make_user(db):
    async def _make(email, role=UserRole.dispatcher):
        return await crud.user.create(db, obj_in={
            "email": email,
            "hashed_password": hash_password(PASSWORD),
            "role": role,
            "created_at": datetime.utcnow(),
        })
    return _make


# API
@pytest.fixture
async def client(db):
    from fleetflow.database import get_database
    from fleetflow.main import app

    app.dependency_overrides[get_database] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture
async def manager(db, make_user):
    user = await make_user("manager@fleetflow.io", UserRole.manager)
    token = await sign_in(db, user.email, PASSWORD)
    return {"Authorization": f"Bearer {token.access_token}"}

@pytest.fixture
async def dispatcher(db, make_user):
    user = await make_user("dispatcher@fleetflow.io", UserRole.dispatcher)
    token = await sign_in(db, user.email, PASSWORD)
    return {"Authorization": f"Bearer {token.access_token}"}
