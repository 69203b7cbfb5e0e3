# fleetflow/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from fleetflow.routes import (
    auth_router, user_router, settings_router, vehicle_router, driver_router,
    trip_router, maintenance_router, fuel_router, report_router,
)
from fleetflow.database import connect_to_mongo, close_mongo_connection, init_db, get_database
from fleetflow.config import get_settings
from fleetflow.errors import register_exception_handlers
from fleetflow.services.auth import check_secret_key, ensure_first_manager
from fleetflow.services.compliance import ComplianceWatcher
from fleetflow.services.system_config import settings_provider

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    check_secret_key()
    await connect_to_mongo()
    await init_db()
    db = await get_database()
    await settings_provider.load(db)
    await ensure_first_manager(db)
    watcher = ComplianceWatcher(
        db,
        lambda: settings_provider.current,
        use_change_streams=settings.ENABLE_CHANGE_STREAMS,
        interval=settings.COMPLIANCE_SWEEP_INTERVAL,
    )
    watcher.start()
    yield
    # Shutdown
    await watcher.stop()
    await close_mongo_connection()

app = FastAPI(title="FleetFlow", lifespan=lifespan)

register_exception_handlers(app)

app.include_router(auth_router, prefix=settings.API_PREFIX, tags=["auth"])
app.include_router(user_router, prefix=settings.API_PREFIX, tags=["users"])
app.include_router(settings_router, prefix=settings.API_PREFIX, tags=["settings"])
app.include_router(vehicle_router, prefix=settings.API_PREFIX, tags=["vehicles"])
app.include_router(driver_router, prefix=settings.API_PREFIX, tags=["drivers"])
app.include_router(trip_router, prefix=settings.API_PREFIX, tags=["trips"])
app.include_router(maintenance_router, prefix=settings.API_PREFIX, tags=["maintenance"])
app.include_router(fuel_router, prefix=settings.API_PREFIX, tags=["fuel"])
app.include_router(report_router, prefix=settings.API_PREFIX, tags=["reports"])

@app.get("/")
async def root():
    return {"message": "Welcome to FleetFlow", "company": settings_provider.current.company_name}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fleetflow.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD
    )
