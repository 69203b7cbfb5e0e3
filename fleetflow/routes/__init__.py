#fleetflow/routes/__init__.py

from .auth import router as auth_router
from .user import router as user_router
from .settings import router as settings_router
from .vehicle import router as vehicle_router
from .driver import router as driver_router
from .trip import router as trip_router
from .maintenance import router as maintenance_router
from .fuel import router as fuel_router
from .report import router as report_router
