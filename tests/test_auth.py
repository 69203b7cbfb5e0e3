from datetime import datetime, timedelta

import jwt
import pytest

from fleetflow import crud
from fleetflow.config import DEFAULT_SECRET_KEY, get_settings
from fleetflow.errors import AuthError, PermissionDenied, ValidationError
from fleetflow.models.enums import UserRole
from fleetflow.schemas.user import UserCreate
from fleetflow.services import auth

from .conftest import PASSWORD


@pytest.fixture
async def manager_session(db, make_user):
    user = await make_user("boss@fleetflow.io", UserRole.manager)
    token = await auth.sign_in(db, user.email, PASSWORD)
    return await auth.resolve_session(db, token.access_token)


def test_password_hashing():
    hashed = auth.hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert auth.verify_password("s3cret!", hashed)
    assert not auth.verify_password("wrong", hashed)

@pytest.mark.asyncio
async def test_sign_in_issues_token_for_session(db, make_user):
    user = await make_user("ops@fleetflow.io")

    token = await auth.sign_in(db, "OPS@fleetflow.io ", PASSWORD)

    assert token.role == UserRole.dispatcher
    payload = jwt.decode(token.access_token, get_settings().SECRET_KEY, algorithms=["HS256"])
    assert payload["sub"] == user.id
    assert await crud.session.get(db, payload["sid"]) is not None

@pytest.mark.asyncio
async def test_sign_in_rejects_bad_password(db, make_user):
    await make_user("ops@fleetflow.io")
    with pytest.raises(AuthError):
        await auth.sign_in(db, "ops@fleetflow.io", "not-it")
    with pytest.raises(AuthError):
        await auth.sign_in(db, "nobody@fleetflow.io", PASSWORD)
    assert await crud.session.count(db) == 0

@pytest.mark.asyncio
async def test_sign_out_ends_session(db, make_user):
    await make_user("ops@fleetflow.io")
    token = await auth.sign_in(db, "ops@fleetflow.io", PASSWORD)
    current = await auth.resolve_session(db, token.access_token)

    await auth.sign_out(db, current)

    with pytest.raises(AuthError) as exc_info:
        await auth.resolve_session(db, token.access_token)
    assert exc_info.value.details == "Session has ended"

@pytest.mark.asyncio
async def test_resolve_rejects_garbage_and_expired_tokens(db, make_user):
    with pytest.raises(AuthError):
        await auth.resolve_session(db, "not-a-token")

    user = await make_user("ops@fleetflow.io")
    session = await crud.session.create(db, obj_in={
        "user_id": user.id,
        "created_at": datetime.utcnow() - timedelta(days=2),
        "expires_at": datetime.utcnow() - timedelta(days=1),
    })
    settings = get_settings()
    stale = jwt.encode(
        {"sub": user.id, "sid": session.id, "exp": datetime.utcnow() + timedelta(minutes=5)},
        settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(AuthError) as exc_info:
        await auth.resolve_session(db, stale)
    assert exc_info.value.details == "Session has expired"

@pytest.mark.asyncio
async def test_deleted_user_is_signed_out(db, make_user):
    user = await make_user("ops@fleetflow.io")
    token = await auth.sign_in(db, user.email, PASSWORD)
    await crud.user.remove(db, user.id)

    with pytest.raises(AuthError) as exc_info:
        await auth.resolve_session(db, token.access_token)
    assert exc_info.value.details == "User record not found"
    assert await crud.session.count(db, {"user_id": user.id}) == 0

@pytest.mark.asyncio
async def test_manager_creates_and_lists_dispatchers(db, manager_session):
    created = await auth.create_dispatcher(
        db, UserCreate(email="New.Dispatcher@fleetflow.io", password="hunter22"), manager_session
    )

    assert created.email == "new.dispatcher@fleetflow.io"
    assert created.role == UserRole.dispatcher
    assert created.created_by == "boss@fleetflow.io"

    users = await auth.list_users(db)
    assert (users.total, users.managers, users.dispatchers) == (2, 1, 1)

    with pytest.raises(ValidationError):
        await auth.create_dispatcher(
            db, UserCreate(email="new.dispatcher@fleetflow.io", password="hunter22"), manager_session
        )

@pytest.mark.asyncio
async def test_delete_user_removes_sessions_but_not_self(db, make_user, manager_session):
    other = await make_user("ops@fleetflow.io")
    await auth.sign_in(db, other.email, PASSWORD)

    await auth.delete_user(db, other.id, manager_session)

    assert await crud.user.get(db, other.id) is None
    assert await crud.session.count(db, {"user_id": other.id}) == 0
    with pytest.raises(PermissionDenied):
        await auth.delete_user(db, manager_session.user_id, manager_session)

@pytest.mark.asyncio
async def test_first_manager_created_once(db):
    settings = get_settings().model_copy(update={
        "FIRST_MANAGER_EMAIL": "root@fleetflow.io", "FIRST_MANAGER_PASSWORD": "changeme1",
    })

    first = await auth.ensure_first_manager(db, settings)
    again = await auth.ensure_first_manager(db, settings)

    assert first.role == UserRole.manager
    assert again is None
    assert await crud.user.count(db) == 1

def test_default_secret_key_is_flagged(caplog):
    weak = get_settings().model_copy(update={"SECRET_KEY": DEFAULT_SECRET_KEY})
    strong = get_settings().model_copy(update={"SECRET_KEY": "k" * 48})

    assert auth.check_secret_key(weak) is False
    assert "SECRET_KEY" in caplog.text
    assert auth.check_secret_key(strong) is True
