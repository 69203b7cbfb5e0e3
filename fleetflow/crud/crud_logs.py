# fleetflow/crud/crud_logs.py
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow.crud.base import CRUDBase
from fleetflow.models.enums import MaintenanceStatus
from fleetflow.models.fuel import FuelLogModel
from fleetflow.models.maintenance import MaintenanceLogModel

class CRUDMaintenanceLog(CRUDBase[MaintenanceLogModel]):
    async def get_open_for_vehicle(
        self, db: AsyncIOMotorDatabase, vehicle_id: str, exclude_log_id: Optional[str] = None
    ) -> List[MaintenanceLogModel]:
        logs = await self.get_multi(
            db, query={"vehicle_id": vehicle_id, "status": MaintenanceStatus.in_progress.value}
        )
        return [log for log in logs if log.id != exclude_log_id]

maintenance_log = CRUDMaintenanceLog("maintenance_logs", MaintenanceLogModel, "maintenance log")
fuel_log = CRUDBase("fuel_logs", FuelLogModel, "fuel log")
