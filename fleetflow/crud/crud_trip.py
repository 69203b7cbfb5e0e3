# fleetflow/crud/crud_trip.py
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow.crud.base import CRUDBase
from fleetflow.models.enums import TripStatus
from fleetflow.models.trip import TripModel

OPEN_STATUSES = [TripStatus.draft.value, TripStatus.dispatched.value]

class CRUDTrip(CRUDBase[TripModel]):
    async def get_multi_recent(
        self, db: AsyncIOMotorDatabase, *, status: Optional[TripStatus] = None,
        skip: int = 0, limit: int = 0
    ) -> List[TripModel]:
        query = {"status": status.value} if status else {}
        return await self.get_multi(db, query=query, sort=[("created_at", -1)], skip=skip, limit=limit)

    async def count_open_for_driver(
        self, db: AsyncIOMotorDatabase, driver_id: str, exclude_trip_id: Optional[str] = None
    ) -> int:
        trips = await self.get_multi(db, query={"driver_id": driver_id, "status": {"$in": OPEN_STATUSES}})
        return len([t for t in trips if t.id != exclude_trip_id])

    async def count_for_vehicle(
        self, db: AsyncIOMotorDatabase, vehicle_id: str, statuses: List[str],
        exclude_trip_id: Optional[str] = None
    ) -> int:
        trips = await self.get_multi(db, query={"vehicle_id": vehicle_id, "status": {"$in": statuses}})
        return len([t for t in trips if t.id != exclude_trip_id])

trip = CRUDTrip("trips", TripModel, "trip")
