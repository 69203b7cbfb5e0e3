# fleetflow/services/transitions.py
"""Status rules shared by the trip, maintenance and vehicle workflows.

Vehicle and driver statuses are written by several independent flows. Each
flow asks these functions for the status to write instead of hard-coding it,
so the result always reflects the records still open against the entity.
"""
from typing import Dict, FrozenSet

from fleetflow.errors import ValidationError
from fleetflow.models.driver import DriverModel
from fleetflow.models.enums import DriverStatus, MaintenanceStatus, TripStatus, VehicleStatus
from fleetflow.models.system_config import SystemConfig

TRIP_TRANSITIONS: Dict[TripStatus, FrozenSet[TripStatus]] = {
    TripStatus.draft: frozenset({TripStatus.dispatched, TripStatus.cancelled}),
    TripStatus.dispatched: frozenset({TripStatus.completed, TripStatus.cancelled}),
    TripStatus.completed: frozenset(),
    TripStatus.cancelled: frozenset(),
}

MAINTENANCE_TRANSITIONS: Dict[MaintenanceStatus, FrozenSet[MaintenanceStatus]] = {
    MaintenanceStatus.in_progress: frozenset({MaintenanceStatus.completed}),
    MaintenanceStatus.completed: frozenset(),
}


def ensure_trip_transition(current: TripStatus, target: TripStatus) -> None:
    if target not in TRIP_TRANSITIONS[current]:
        raise ValidationError(
            message="Invalid transition",
            details=f"A {current.value} trip cannot be moved to {target.value}",
            example="draft -> dispatched -> completed, or cancel from draft/dispatched"
        )


def ensure_maintenance_transition(current: MaintenanceStatus, target: MaintenanceStatus) -> None:
    if target not in MAINTENANCE_TRANSITIONS[current]:
        raise ValidationError(
            message="Invalid transition",
            details=f"A {current.value.replace('_', ' ')} maintenance log cannot be moved to {target.value}",
        )


def derive_vehicle_status(
    current: VehicleStatus, *, open_maintenance: int, dispatched_trips: int
) -> VehicleStatus:
    """Status a vehicle should hold given the records still open against it."""
    if open_maintenance:
        return VehicleStatus.in_shop
    if dispatched_trips:
        return VehicleStatus.on_trip
    if current == VehicleStatus.out_of_service:
        return VehicleStatus.out_of_service
    return VehicleStatus.available


def released_driver_status(
    config: SystemConfig, driver: DriverModel, *, other_open_trips: int
) -> DriverStatus:
    """Status for a driver whose trip just closed."""
    if driver.status == DriverStatus.suspended:
        return DriverStatus.suspended
    if other_open_trips:
        return DriverStatus.on_duty
    return DriverStatus.available if config.auto_reset_driver else DriverStatus.off_duty


def vehicle_in_pool(config: SystemConfig, status: VehicleStatus) -> bool:
    """Whether a vehicle may be offered for a new trip."""
    if status == VehicleStatus.available:
        return True
    if status == VehicleStatus.in_shop:
        return not config.require_maintenance
    return False
