# fleetflow/services/auth.py
"""Sign-in sessions and user accounts.

A bearer token only names a session record. Signing out deletes the record,
and deleting a user deletes all of theirs, so a token stops working as soon
as either happens even though its signature is still valid.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from motor.motor_asyncio import AsyncIOMotorDatabase
from passlib.context import CryptContext

from fleetflow import crud
from fleetflow.config import DEFAULT_SECRET_KEY, Settings, get_settings
from fleetflow.errors import AuthError, PermissionDenied, ValidationError
from fleetflow.models.enums import UserRole
from fleetflow.models.user import UserModel
from fleetflow.schemas.user import SessionInfo, Token, UserCreate, UserOut, UsersOut

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _credentials_error(details: str) -> AuthError:
    return AuthError(message="Could not validate credentials", details=details, example="Sign in again")


async def sign_in(
    db: AsyncIOMotorDatabase, email: str, password: str, settings: Optional[Settings] = None
) -> Token:
    settings = settings or get_settings()
    user = await crud.user.get_by_email(db, email=email)
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed sign-in for %s", email)
        raise AuthError(message="Incorrect email or password")

    now = datetime.utcnow()
    expires_at = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    session = await crud.session.create(db, obj_in={
        "user_id": user.id,
        "created_at": now,
        "expires_at": expires_at,
    })
    token = jwt.encode(
        {"sub": user.id, "sid": session.id, "exp": expires_at},
        settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )
    logger.info("User %s signed in as %s", user.email, user.role.value)
    return Token(access_token=token, role=user.role)


async def resolve_session(
    db: AsyncIOMotorDatabase, token: str, settings: Optional[Settings] = None
) -> SessionInfo:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except InvalidTokenError as e:
        raise _credentials_error(str(e))
    session_id = payload.get("sid")
    if not session_id:
        raise _credentials_error("Token does not name a session")

    session = await crud.session.get(db, session_id)
    if session is None:
        raise _credentials_error("Session has ended")
    if session.expires_at < datetime.utcnow():
        raise _credentials_error("Session has expired")

    user = await crud.user.get(db, session.user_id)
    if user is None:
        # the account was removed while signed in
        await crud.session.remove_for_user(db, session.user_id)
        logger.warning("Session %s belongs to a deleted user, signing out", session.id)
        raise _credentials_error("User record not found")

    return SessionInfo(
        session_id=session.id,
        user_id=user.id,
        email=user.email,
        role=user.role,
        expires_at=session.expires_at,
    )


async def sign_out(db: AsyncIOMotorDatabase, current: SessionInfo) -> None:
    await crud.session.remove(db, current.session_id)
    logger.info("User %s signed out", current.email)


async def list_users(db: AsyncIOMotorDatabase) -> UsersOut:
    users = await crud.user.get_multi(db, sort=[("created_at", -1)])
    return UsersOut(
        total=len(users),
        managers=len([u for u in users if u.role == UserRole.manager]),
        dispatchers=len([u for u in users if u.role == UserRole.dispatcher]),
        users=[UserOut.from_model(u) for u in users],
    )


async def _create_user(
    db: AsyncIOMotorDatabase, user_in: UserCreate, role: UserRole, created_by: Optional[str]
) -> UserModel:
    email = user_in.email.strip().lower()
    if "@" not in email:
        raise ValidationError(
            message="Invalid email",
            details=f"'{user_in.email}' is not an email address",
            example="dispatcher@fleetflow.io",
        )
    if await crud.user.get_by_email(db, email=email):
        raise ValidationError(
            message="Email already registered",
            details=f"A user with email '{email}' already exists",
        )
    user = await crud.user.create(db, obj_in={
        "email": email,
        "hashed_password": hash_password(user_in.password),
        "role": role,
        "created_by": created_by,
        "created_at": datetime.utcnow(),
    })
    logger.info("%s account %s created by %s", role.value.capitalize(), email, created_by)
    return user


async def create_dispatcher(db: AsyncIOMotorDatabase, user_in: UserCreate, current: SessionInfo) -> UserModel:
    return await _create_user(db, user_in, UserRole.dispatcher, created_by=current.email)


async def delete_user(db: AsyncIOMotorDatabase, user_id: str, current: SessionInfo) -> None:
    if user_id == current.user_id:
        raise PermissionDenied(
            message="Cannot delete yourself",
            details="You cannot delete your own account",
            example="Ask another manager to remove this account",
        )
    user = await crud.user.get_or_raise(db, user_id)
    ended = await crud.session.remove_for_user(db, user.id)
    await crud.user.remove(db, user.id)
    logger.warning("User %s deleted by %s (%d sessions ended)", user.email, current.email, ended)


async def ensure_first_manager(db: AsyncIOMotorDatabase, settings: Optional[Settings] = None) -> Optional[UserModel]:
    """Create the bootstrap manager account named in the environment, once."""
    settings = settings or get_settings()
    if not settings.FIRST_MANAGER_EMAIL or not settings.FIRST_MANAGER_PASSWORD:
        return None
    if await crud.user.get_by_email(db, email=settings.FIRST_MANAGER_EMAIL):
        return None
    user_in = UserCreate(email=settings.FIRST_MANAGER_EMAIL, password=settings.FIRST_MANAGER_PASSWORD)
    return await _create_user(db, user_in, UserRole.manager, created_by=None)


def check_secret_key(settings: Optional[Settings] = None) -> bool:
    """Warn when tokens are still signed with the built-in development key."""
    settings = settings or get_settings()
    if settings.SECRET_KEY == DEFAULT_SECRET_KEY or len(settings.SECRET_KEY) < 32:
        logger.warning("SECRET_KEY is unset or shorter than 32 bytes; set a strong key before deploying")
        return False
    return True
