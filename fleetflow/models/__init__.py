# fleetflow/models/__init__.py
from .enums import (
    VehicleType, VehicleStatus, DriverCategory, DriverStatus, TripStatus,
    ServiceType, MaintenanceStatus, UserRole,
)
from .vehicle import VehicleModel
from .driver import DriverModel
from .trip import TripModel, UNASSIGNED_DRIVER
from .maintenance import MaintenanceLogModel
from .fuel import FuelLogModel
from .user import UserModel, SessionModel
from .system_config import SystemConfig, SYSTEM_CONFIG_ID
