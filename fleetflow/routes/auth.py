# fleetflow/routes/auth.py
from typing import Annotated
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from fleetflow.deps import CurrentSession, DatabaseDep
from fleetflow.schemas.user import SessionInfo, Token
from fleetflow.services import auth

router = APIRouter()

@router.post("/auth/login", response_model=Token)
async def login(form_data: Annotated[OAuth2PasswordRequestForm, Depends()], db: DatabaseDep):
    """OAuth2 password flow; the username field carries the email"""
    return await auth.sign_in(db, form_data.username, form_data.password)

@router.post("/auth/logout")
async def logout(db: DatabaseDep, current: CurrentSession):
    await auth.sign_out(db, current)
    return {"message": "Signed out"}

@router.get("/auth/me", response_model=SessionInfo)
async def read_current_session(current: CurrentSession):
    return current
