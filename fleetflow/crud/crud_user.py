# fleetflow/crud/crud_user.py
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from fleetflow.crud.base import CRUDBase
from fleetflow.models.user import SessionModel, UserModel

class CRUDUser(CRUDBase[UserModel]):
    async def get_by_email(self, db: AsyncIOMotorDatabase, *, email: str) -> Optional[UserModel]:
        return await self.find_one(db, {"email": email.strip().lower()})


class CRUDSession(CRUDBase[SessionModel]):
    async def remove_for_user(self, db: AsyncIOMotorDatabase, user_id: str) -> int:
        try:
            result = await self.collection(db).delete_many({"user_id": user_id})
        except PyMongoError as e:
            raise self._failed("delete", e)
        return result.deleted_count

user = CRUDUser("users", UserModel, "user")
session = CRUDSession("sessions", SessionModel, "session")
