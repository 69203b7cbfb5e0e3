from datetime import timedelta

import pytest

from fleetflow import crud
from fleetflow.models.enums import DriverStatus, VehicleStatus

from .conftest import PASSWORD, TODAY


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to FleetFlow"

@pytest.mark.asyncio
async def test_requests_require_a_token(client):
    response = await client.get("/api/vehicles/")
    assert response.status_code == 401

@pytest.mark.asyncio
async def test_login_logout_flow(client, make_user):
    await make_user("ops@fleetflow.io")

    response = await client.post("/api/auth/login", data={"username": "ops@fleetflow.io", "password": PASSWORD})
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    me = await client.get("/api/auth/me", headers=headers)
    assert me.json()["role"] == "dispatcher"

    assert (await client.post("/api/auth/logout", headers=headers)).status_code == 200
    after = await client.get("/api/auth/me", headers=headers)
    assert after.status_code == 401
    assert after.json()["detail"]["message"] == "Could not validate credentials"

@pytest.mark.asyncio
async def test_bad_login(client, make_user):
    await make_user("ops@fleetflow.io")
    response = await client.post("/api/auth/login", data={"username": "ops@fleetflow.io", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"]["message"] == "Incorrect email or password"

@pytest.mark.asyncio
async def test_trip_lifecycle_over_http(client, dispatcher, make_vehicle, make_driver):
    vehicle = await make_vehicle(name="V1", capacity=1000)
    driver = await make_driver(name="D1")
    body = {
        "vehicle_id": vehicle.id, "driver_id": driver.id,
        "cargo_weight": 1200, "origin": "Port", "destination": "Mill",
    }

    overloaded = await client.post("/api/trips/", json=body, headers=dispatcher)
    assert overloaded.status_code == 400
    assert overloaded.json()["detail"]["message"] == "Overload blocked"

    created = await client.post("/api/trips/", json={**body, "cargo_weight": 800}, headers=dispatcher)
    assert created.status_code == 200
    trip = created.json()
    assert trip["status"] == "draft"
    assert "_id" not in trip

    dispatched = await client.post(f"/api/trips/{trip['id']}/dispatch", headers=dispatcher)
    assert dispatched.json()["status"] == "dispatched"

    unconfirmed = await client.post(f"/api/trips/{trip['id']}/cancel", headers=dispatcher)
    assert unconfirmed.status_code == 400

    completed = await client.post(f"/api/trips/{trip['id']}/complete", headers=dispatcher)
    assert completed.json()["status"] == "completed"

    again = await client.post(f"/api/trips/{trip['id']}/cancel", params={"confirm": "true"}, headers=dispatcher)
    assert again.status_code == 400
    assert again.json()["detail"]["message"] == "Invalid transition"

    listed = await client.get("/api/trips/", params={"status": "completed"}, headers=dispatcher)
    assert [t["id"] for t in listed.json()] == [trip["id"]]

@pytest.mark.asyncio
async def test_invalid_and_unknown_ids(client, dispatcher):
    malformed = await client.get("/api/trips/not-an-id", headers=dispatcher)
    assert malformed.status_code == 400
    assert malformed.json()["detail"]["message"] == "Invalid trip ID format"

    missing = await client.get("/api/vehicles/507f1f77bcf86cd799439011", headers=dispatcher)
    assert missing.status_code == 404

@pytest.mark.asyncio
async def test_manager_only_actions(client, dispatcher, manager, make_vehicle):
    vehicle = await make_vehicle()

    forbidden = await client.delete(f"/api/vehicles/{vehicle.id}", headers=dispatcher)
    assert forbidden.status_code == 403
    assert (await client.get("/api/users/", headers=dispatcher)).status_code == 403
    assert (await client.put("/api/settings/", json={"rate_per_kg": 1}, headers=dispatcher)).status_code == 403

    deleted = await client.delete(f"/api/vehicles/{vehicle.id}", headers=manager)
    assert deleted.status_code == 200

@pytest.mark.asyncio
async def test_settings_changes_apply_to_next_request(client, manager, make_vehicle, make_driver):
    vehicle = await make_vehicle(capacity=1000)
    driver = await make_driver()

    response = await client.put("/api/settings/", json={"prevent_overload": False}, headers=manager)
    assert response.status_code == 200
    assert response.json()["updated_by"] == "manager@fleetflow.io"

    created = await client.post("/api/trips/", headers=manager, json={
        "vehicle_id": vehicle.id, "driver_id": driver.id,
        "cargo_weight": 5000, "origin": "A", "destination": "B",
    })
    assert created.status_code == 200

    reset = await client.post("/api/settings/reset", headers=manager)
    assert reset.json()["prevent_overload"] is True

@pytest.mark.asyncio
async def test_vehicle_and_driver_endpoints(client, dispatcher, db):
    created = await client.post("/api/vehicles/", headers=dispatcher, json={
        "name": "Cargo Bike", "license_plate": "bk-1", "type": "Bike", "capacity": 40,
    })
    assert created.status_code == 200
    assert created.json()["license_plate"] == "BK-1"

    driver = await client.post("/api/drivers/", headers=dispatcher, json={
        "name": "Kim", "license_number": "B-1",
        "license_expiry": (TODAY - timedelta(days=1)).isoformat(), "category": "bike",
    })
    assert driver.status_code == 200
    assert driver.json()["status"] == "suspended"

    eligible = await client.get(
        "/api/trips/eligible-drivers", params={"vehicle_id": created.json()["id"]}, headers=dispatcher
    )
    assert eligible.json() == []

    performance = await client.get("/api/drivers/performance", headers=dispatcher)
    assert performance.json()[0]["license_expired"] is True

@pytest.mark.asyncio
async def test_maintenance_and_reports(client, dispatcher, make_vehicle):
    vehicle = await make_vehicle()

    opened = await client.post("/api/maintenance/", headers=dispatcher, json={
        "vehicle_id": vehicle.id, "service_type": "preventative", "description": "Service", "cost": 120,
    })
    assert opened.status_code == 200
    assert (await client.get(f"/api/vehicles/{vehicle.id}", headers=dispatcher)).json()["status"] == "in_shop"

    fuel = await client.post("/api/fuel-logs/", headers=dispatcher, json={
        "vehicle_id": vehicle.id, "liters": 50, "cost": 80,
    })
    assert fuel.json()["date"] == TODAY.isoformat()

    kpis = (await client.get("/api/reports/kpis", headers=dispatcher)).json()
    assert kpis["maintenance_alerts"] == 1
    assert kpis["total_operational_cost"] == 200

    closed = await client.post(f"/api/maintenance/{opened.json()['id']}/complete", headers=dispatcher)
    assert closed.json()["status"] == "completed"
    assert (await client.get(f"/api/vehicles/{vehicle.id}", headers=dispatcher)).json()["status"] == "available"

    for path in ("operational-costs", "pnl", "monthly-trend", "alerts"):
        assert (await client.get(f"/api/reports/{path}", headers=dispatcher)).status_code == 200

@pytest.mark.asyncio
async def test_compliance_sweep_endpoint(client, dispatcher, make_driver, db):
    expired = await make_driver(license_expiry=TODAY - timedelta(days=1))

    response = await client.post("/api/drivers/compliance-sweep", headers=dispatcher)

    assert response.json() == {"suspended": [expired.id], "count": 1}
    assert (await crud.driver.get(db, expired.id)).status == DriverStatus.suspended

@pytest.mark.asyncio
async def test_user_management(client, manager):
    created = await client.post("/api/users/", headers=manager, json={
        "email": "night.shift@fleetflow.io", "password": "hunter22",
    })
    assert created.status_code == 200
    listing = (await client.get("/api/users/", headers=manager)).json()
    assert listing["dispatchers"] == 1

    deleted = await client.delete(f"/api/users/{created.json()['id']}", headers=manager)
    assert deleted.status_code == 200

@pytest.mark.asyncio
async def test_nan_cargo_request_is_rejected(client, dispatcher, make_vehicle, make_driver, db):
    vehicle = await make_vehicle(capacity=1000)
    driver = await make_driver()
    body = (
        f'{{"vehicle_id": "{vehicle.id}", "driver_id": "{driver.id}", '
        '"cargo_weight": NaN, "origin": "A", "destination": "B"}'
    )

    response = await client.post(
        "/api/trips/", content=body, headers={**dispatcher, "Content-Type": "application/json"}
    )

    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Invalid request"
    assert "cargo_weight" in response.json()["detail"]["details"]
    assert await crud.trip.count(db) == 0
    assert (await crud.driver.get(db, driver.id)).status == DriverStatus.available

@pytest.mark.asyncio
async def test_settings_null_value_is_a_bad_request(client, manager):
    response = await client.put("/api/settings/", json={"currency": None}, headers=manager)

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Invalid settings"
    assert (await client.get("/api/settings/", headers=manager)).json()["currency"] == "$"

@pytest.mark.asyncio
async def test_malformed_driver_record_is_skipped_in_listing(client, dispatcher, make_driver, db):
    driver = await make_driver(name="Kept")
    await db.drivers.insert_one({"name": "Broken", "license_number": "X-0", "status": "available"})

    response = await client.get("/api/drivers/", headers=dispatcher)

    assert response.status_code == 200
    assert [d["id"] for d in response.json()] == [driver.id]
