# fleetflow/routes/user.py
from fastapi import APIRouter

from fleetflow.deps import DatabaseDep, ManagerSession
from fleetflow.schemas.user import UserCreate, UserOut, UsersOut
from fleetflow.services import auth

router = APIRouter()

@router.get("/users/", response_model=UsersOut)
async def get_users(db: DatabaseDep, current: ManagerSession):
    return await auth.list_users(db)

@router.post("/users/", response_model=UserOut)
async def create_user(user: UserCreate, db: DatabaseDep, current: ManagerSession):
    """Create a dispatcher account"""
    created = await auth.create_dispatcher(db, user, current)
    return UserOut.from_model(created)

@router.delete("/users/{user_id}")
async def delete_user(user_id: str, db: DatabaseDep, current: ManagerSession):
    await auth.delete_user(db, user_id, current)
    return {"message": "User deleted successfully"}
