# fleetflow/schemas/__init__.py
from .vehicle import VehicleCreate, VehicleUpdate, VehicleOut
from .driver import DriverCreate, DriverUpdate, DriverOut, DriverPerformance
from .trip import TripCreate, TripOut
from .maintenance import MaintenanceLogCreate, MaintenanceLogOut
from .fuel import FuelLogCreate, FuelLogOut
from .user import UserCreate, UserOut, UsersOut, Token, SessionInfo
from .system_config import SystemConfigUpdate
from .report import FleetKpis, VehicleCost, PnlReport, MonthlyCost, AlertsReport
