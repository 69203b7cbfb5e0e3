# fleetflow/models/enums.py
from enum import Enum
from typing import Any


def normalize_token(value: Any) -> Any:
    """Map loosely typed stored strings ("In Shop", "on-trip") onto enum values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str):
        return "_".join(value.strip().lower().replace("-", " ").split())
    return value


class VehicleType(str, Enum):
    truck = "truck"
    van = "van"
    bike = "bike"
    car = "car"


class VehicleStatus(str, Enum):
    available = "available"
    on_trip = "on_trip"
    in_shop = "in_shop"
    out_of_service = "out_of_service"


class DriverCategory(str, Enum):
    truck = "truck"
    van = "van"
    bike = "bike"


class DriverStatus(str, Enum):
    available = "available"
    on_duty = "on_duty"
    off_duty = "off_duty"
    suspended = "suspended"


class TripStatus(str, Enum):
    draft = "draft"
    dispatched = "dispatched"
    completed = "completed"
    cancelled = "cancelled"


class ServiceType(str, Enum):
    preventative = "preventative"
    repair = "repair"


class MaintenanceStatus(str, Enum):
    in_progress = "in_progress"
    completed = "completed"


class UserRole(str, Enum):
    manager = "manager"
    dispatcher = "dispatcher"
