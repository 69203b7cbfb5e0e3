# fleetflow/database.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from fleetflow.config import get_settings

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "vehicles",
    "drivers",
    "trips",
    "maintenance_logs",
    "fuel_logs",
    "users",
    "sessions",
    "settings",
)

class Database:
    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

db = Database()

async def connect_to_mongo():
    settings = get_settings()
    db.client = AsyncIOMotorClient(settings.MONGODB_URI)
    db.db = db.client[settings.MONGODB_DB_NAME]
    logger.info("Connected to MongoDB: %s", settings.MONGODB_DB_NAME)

async def close_mongo_connection():
    if db.client:
        db.client.close()
        logger.info("Closed MongoDB connection")

async def get_database() -> AsyncIOMotorDatabase:
    return db.db

async def create_indexes(database: AsyncIOMotorDatabase):
    # Vehicle indexes
    await database.vehicles.create_index([("license_plate", ASCENDING)], unique=True)
    await database.vehicles.create_index([("status", ASCENDING)])

    # Driver indexes
    await database.drivers.create_index([("license_number", ASCENDING)])
    await database.drivers.create_index([("license_expiry", ASCENDING)])

    # Trip indexes
    await database.trips.create_index([("status", ASCENDING)])
    await database.trips.create_index([("created_at", DESCENDING)])
    await database.trips.create_index([("vehicle_id", ASCENDING)])
    await database.trips.create_index([("driver_id", ASCENDING)])

    # Log indexes
    await database.maintenance_logs.create_index([("vehicle_id", ASCENDING)])
    await database.maintenance_logs.create_index([("status", ASCENDING)])
    await database.fuel_logs.create_index([("vehicle_id", ASCENDING)])

    # Identity indexes
    await database.users.create_index([("email", ASCENDING)], unique=True)
    await database.sessions.create_index([("user_id", ASCENDING)])

async def init_db() -> bool:
    if not db.client:
        await connect_to_mongo()
    try:
        collections = await db.db.list_collection_names()
        for name in COLLECTIONS:
            if name not in collections:
                await db.db.create_collection(name)

        await create_indexes(db.db)

        logger.info("Database initialized successfully")
        return True
    except PyMongoError as e:
        logger.error("Database initialization failed: %s", e)
        return False
