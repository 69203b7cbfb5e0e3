# fleetflow/crud/crud_driver.py
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow.crud.base import CRUDBase
from fleetflow.models.driver import DriverModel
from fleetflow.models.enums import DriverStatus

class CRUDDriver(CRUDBase[DriverModel]):
    async def get_by_license(
        self, db: AsyncIOMotorDatabase, *, license_number: str
    ) -> Optional[DriverModel]:
        return await self.find_one(db, {"license_number": license_number.strip()})

    async def get_multi_available(self, db: AsyncIOMotorDatabase) -> List[DriverModel]:
        return await self.get_multi(
            db, query={"status": DriverStatus.available.value}, sort=[("name", 1)]
        )

driver = CRUDDriver("drivers", DriverModel, "driver")
