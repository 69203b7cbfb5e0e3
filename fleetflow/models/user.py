# fleetflow/models/user.py
from datetime import datetime
from typing import Optional
from pydantic import field_validator

from .base import DocumentModel
from .enums import UserRole, normalize_token

class UserModel(DocumentModel):
    email: str
    hashed_password: str
    role: UserRole = UserRole.dispatcher
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v):
        return normalize_token(v)


class SessionModel(DocumentModel):
    user_id: str
    created_at: datetime
    expires_at: datetime
