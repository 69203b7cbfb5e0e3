# fleetflow/schemas/user.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from fleetflow.models.enums import UserRole
from .base import OutSchema

class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=72)

class UserOut(OutSchema):
    email: str
    role: UserRole
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

class UsersOut(BaseModel):
    total: int
    managers: int
    dispatchers: int
    users: List[UserOut]

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole

class SessionInfo(BaseModel):
    """The signed-in session a request runs under"""
    session_id: str
    user_id: str
    email: str
    role: UserRole
    expires_at: datetime

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.manager
