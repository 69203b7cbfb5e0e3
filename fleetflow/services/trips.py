# fleetflow/services/trips.py
"""Trip lifecycle: creation, dispatch, completion and cancellation.

A trip moves draft -> dispatched -> completed, or is cancelled from draft or
dispatched. Each transition also sets the status of the trip's vehicle and
driver; the three writes go through a ``WriteSequence``.
"""
import logging
import math
from datetime import date, datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow import crud
from fleetflow.errors import ValidationError
from fleetflow.models.driver import DriverModel
from fleetflow.models.enums import DriverStatus, TripStatus, VehicleStatus
from fleetflow.models.system_config import SystemConfig
from fleetflow.models.trip import UNASSIGNED_DRIVER, TripModel
from fleetflow.models.vehicle import VehicleModel
from fleetflow.schemas.trip import TripCreate
from fleetflow.services.transitions import (
    derive_vehicle_status,
    ensure_trip_transition,
    released_driver_status,
    vehicle_in_pool,
)
from fleetflow.services.writes import WriteSequence

logger = logging.getLogger(__name__)


class TripLifecycle:
    def __init__(self, db: AsyncIOMotorDatabase, config: SystemConfig, today: Optional[date] = None):
        self.db = db
        self.config = config
        self.today = today or date.today()

    # read-only views

    async def available_vehicles(self) -> List[VehicleModel]:
        statuses = [VehicleStatus.available]
        if not self.config.require_maintenance:
            statuses.append(VehicleStatus.in_shop)
        return await crud.vehicle.get_multi_by_status(self.db, statuses=statuses)

    async def eligible_drivers(self, vehicle_id: str) -> List[DriverModel]:
        vehicle = await crud.vehicle.get(self.db, vehicle_id)
        if vehicle is None:
            return []
        drivers = await crud.driver.get_multi_available(self.db)
        return [d for d in drivers if d.category.value == vehicle.type.value]

    async def list_trips(self, status: Optional[TripStatus] = None, skip: int = 0, limit: int = 0) -> List[TripModel]:
        return await crud.trip.get_multi_recent(self.db, status=status, skip=skip, limit=limit)

    # creation

    def _check_driver(self, driver: DriverModel, vehicle: VehicleModel) -> None:
        if self.config.block_expired_license:
            if driver.status == DriverStatus.suspended:
                raise ValidationError(
                    message="Driver suspended",
                    details=f"{driver.name} is suspended and cannot be assigned",
                )
            if driver.license_expired(self.today):
                raise ValidationError(
                    message="License expired",
                    details=f"{driver.name}'s license expired on {driver.license_expiry.isoformat()}",
                )
        if driver.status != DriverStatus.available:
            raise ValidationError(
                message="Driver not available",
                details=f"{driver.name} is currently {driver.status.value.replace('_', ' ')}",
            )
        if driver.category.value != vehicle.type.value:
            raise ValidationError(
                message="Driver category mismatch",
                details=f"A {driver.category.value} driver cannot operate a {vehicle.type.value}",
            )

    async def create(self, trip_in: TripCreate) -> TripModel:
        origin = (trip_in.origin or "").strip()
        destination = (trip_in.destination or "").strip()

        # 1. mandatory fields
        if not trip_in.vehicle_id or not trip_in.cargo_weight or not origin or not destination:
            raise ValidationError(
                message="Missing fields",
                details="Vehicle, cargo weight, origin and destination are required",
            )
        if not math.isfinite(trip_in.cargo_weight) or trip_in.cargo_weight <= 0:
            raise ValidationError(
                message="Missing fields",
                details="Cargo weight must be a positive number",
            )

        # 2. driver assignment rule
        if self.config.require_driver and not trip_in.driver_id:
            raise ValidationError(
                message="Driver required",
                details="Operational rule: driver assignment is required",
            )

        # 3. vehicle must come from the available pool
        vehicle = await crud.vehicle.get(self.db, trip_in.vehicle_id)
        if vehicle is None or not vehicle_in_pool(self.config, vehicle.status):
            raise ValidationError(
                message="Vehicle not found",
                details=f"Vehicle {trip_in.vehicle_id} is not in the available vehicle pool",
            )

        # 4. overload rule
        if self.config.prevent_overload and trip_in.cargo_weight > vehicle.capacity:
            raise ValidationError(
                message="Overload blocked",
                details=(
                    f"Cargo ({trip_in.cargo_weight:g}kg) exceeds vehicle capacity "
                    f"({vehicle.capacity:g}kg)"
                ),
            )

        driver = None
        if trip_in.driver_id:
            driver = await crud.driver.get(self.db, trip_in.driver_id)
            if driver is None:
                raise ValidationError(
                    message="Driver not found",
                    details=f"No driver found with ID: {trip_in.driver_id}",
                )
            self._check_driver(driver, vehicle)

        freight = trip_in.freight_amount
        if freight is None:
            freight = round(trip_in.cargo_weight * self.config.rate_per_kg, 2) if self.config.rate_per_kg > 0 else 0
        if freight < 0:
            raise ValidationError(message="Invalid freight amount", details="Freight amount cannot be negative")

        writes = WriteSequence(self.db, "create trip")
        created = writes.create(crud.trip, {
            "origin": origin,
            "destination": destination,
            "cargo_weight": trip_in.cargo_weight,
            "freight_amount": freight,
            "vehicle_id": vehicle.id,
            "vehicle_name": vehicle.name,
            "driver_id": driver.id if driver else None,
            "driver_name": driver.name if driver else UNASSIGNED_DRIVER,
            "status": TripStatus.draft,
            "created_at": datetime.utcnow(),
            "completed_at": None,
        })
        if driver:
            writes.update(crud.driver, driver, {"status": DriverStatus.on_duty})
        await writes.commit()

        trip = created.created
        logger.info("Trip %s created for vehicle %s (driver %s)", trip.id, vehicle.id, trip.driver_id)
        return trip

    # transitions

    async def _get_driver(self, trip: TripModel) -> Optional[DriverModel]:
        if not trip.driver_id:
            return None
        return await crud.driver.get_or_raise(self.db, trip.driver_id)

    async def dispatch(self, trip_id: str) -> TripModel:
        trip = await crud.trip.get_or_raise(self.db, trip_id)
        ensure_trip_transition(trip.status, TripStatus.dispatched)

        vehicle = await crud.vehicle.get_or_raise(self.db, trip.vehicle_id)
        if vehicle.status in (VehicleStatus.on_trip, VehicleStatus.out_of_service):
            raise ValidationError(
                message="Vehicle unavailable",
                details=f"{vehicle.name} is {vehicle.status.value.replace('_', ' ')}",
            )
        if vehicle.status == VehicleStatus.in_shop and self.config.require_maintenance:
            raise ValidationError(
                message="Vehicle unavailable",
                details=f"{vehicle.name} is in the shop",
            )

        driver = await self._get_driver(trip)
        if driver and self.config.block_expired_license:
            if driver.status == DriverStatus.suspended or driver.license_expired(self.today):
                raise ValidationError(
                    message="License expired",
                    details=f"{driver.name} cannot be dispatched with a suspended or expired license",
                )

        writes = WriteSequence(self.db, "dispatch trip")
        writes.update(crud.trip, trip, {"status": TripStatus.dispatched})
        writes.update(crud.vehicle, vehicle, {"status": VehicleStatus.on_trip})
        if driver:
            writes.update(crud.driver, driver, {"status": DriverStatus.on_duty})
        await writes.commit()

        logger.info("Trip %s dispatched", trip.id)
        return trip.model_copy(update={"status": TripStatus.dispatched})

    async def _close(self, trip: TripModel, status: TripStatus, label: str) -> TripModel:
        vehicle = await crud.vehicle.get_or_raise(self.db, trip.vehicle_id)
        driver = await self._get_driver(trip)

        open_logs = await crud.maintenance_log.get_open_for_vehicle(self.db, vehicle.id)
        other_dispatched = await crud.trip.count_for_vehicle(
            self.db, vehicle.id, [TripStatus.dispatched.value], exclude_trip_id=trip.id
        )
        # open maintenance keeps the vehicle in_shop even when the trip is cancelled
        vehicle_status = derive_vehicle_status(
            vehicle.status, open_maintenance=len(open_logs), dispatched_trips=other_dispatched
        )

        trip_values = {"status": status}
        if status == TripStatus.completed:
            trip_values["completed_at"] = datetime.utcnow()

        writes = WriteSequence(self.db, label)
        writes.update(crud.trip, trip, trip_values)
        writes.update(crud.vehicle, vehicle, {"status": vehicle_status})
        if driver:
            other_open = await crud.trip.count_open_for_driver(self.db, driver.id, exclude_trip_id=trip.id)
            writes.update(crud.driver, driver, {
                "status": released_driver_status(self.config, driver, other_open_trips=other_open)
            })
        await writes.commit()

        logger.info("Trip %s %s; vehicle %s is %s", trip.id, status.value, vehicle.id, vehicle_status.value)
        return trip.model_copy(update=trip_values)

    async def complete(self, trip_id: str) -> TripModel:
        trip = await crud.trip.get_or_raise(self.db, trip_id)
        ensure_trip_transition(trip.status, TripStatus.completed)
        return await self._close(trip, TripStatus.completed, "complete trip")

    async def cancel(self, trip_id: str, confirm: bool = False) -> TripModel:
        trip = await crud.trip.get_or_raise(self.db, trip_id)
        ensure_trip_transition(trip.status, TripStatus.cancelled)
        if not confirm:
            raise ValidationError(
                message="Confirmation required",
                details="Cancelling a trip is irreversible and releases its vehicle and driver",
                example="Repeat the request with confirm=true",
            )
        return await self._close(trip, TripStatus.cancelled, "cancel trip")

    # administrative override

    async def delete(self, trip_id: str) -> None:
        """Remove a trip record; an open trip releases its vehicle and driver."""
        trip = await crud.trip.get_or_raise(self.db, trip_id)
        writes = WriteSequence(self.db, "delete trip")
        writes.remove(crud.trip, trip)

        if trip.is_open:
            vehicle = await crud.vehicle.get(self.db, trip.vehicle_id)
            if vehicle:
                open_logs = await crud.maintenance_log.get_open_for_vehicle(self.db, vehicle.id)
                other_dispatched = await crud.trip.count_for_vehicle(
                    self.db, vehicle.id, [TripStatus.dispatched.value], exclude_trip_id=trip.id
                )
                writes.update(crud.vehicle, vehicle, {"status": derive_vehicle_status(
                    vehicle.status, open_maintenance=len(open_logs), dispatched_trips=other_dispatched
                )})
            driver = await crud.driver.get(self.db, trip.driver_id) if trip.driver_id else None
            if driver:
                other_open = await crud.trip.count_open_for_driver(self.db, driver.id, exclude_trip_id=trip.id)
                writes.update(crud.driver, driver, {
                    "status": released_driver_status(self.config, driver, other_open_trips=other_open)
                })

        await writes.commit()
        logger.warning("Trip %s (%s) deleted", trip.id, trip.status.value)
