# fleetflow/crud/__init__.py
from .base import CRUDBase
from .crud_vehicle import vehicle
from .crud_driver import driver
from .crud_trip import trip
from .crud_logs import maintenance_log, fuel_log
from .crud_user import user, session

__all__ = [
    'CRUDBase',
    'vehicle',
    'driver',
    'trip',
    'maintenance_log',
    'fuel_log',
    'user',
    'session',
]
