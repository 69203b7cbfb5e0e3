# fleetflow/crud/crud_vehicle.py
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow.crud.base import CRUDBase
from fleetflow.models.enums import VehicleStatus
from fleetflow.models.vehicle import VehicleModel

class CRUDVehicle(CRUDBase[VehicleModel]):
    async def get_by_license_plate(
        self, db: AsyncIOMotorDatabase, *, license_plate: str
    ) -> Optional[VehicleModel]:
        return await self.find_one(db, {"license_plate": license_plate.strip().upper()})

    async def get_multi_by_status(
        self, db: AsyncIOMotorDatabase, *, statuses: List[VehicleStatus]
    ) -> List[VehicleModel]:
        return await self.get_multi(
            db, query={"status": {"$in": [s.value for s in statuses]}}, sort=[("name", 1)]
        )

vehicle = CRUDVehicle("vehicles", VehicleModel, "vehicle")
