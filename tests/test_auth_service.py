"""Tests for AuthManager — signup and signin flows."""

from __future__ import annotations

from typing import Any

import pytest

from osmnotes.config import AuthSettings
from osmnotes.errors import AuthenticationError, ConflictError, ValidationError
from osmnotes.schemas.events import EventType
from osmnotes.services.auth import AuthManager


def _payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "NS": "notes",
        "DB": "prod",
        "AC": "user",
        "osm_id": "4242",
        "password": [1, 2, 3],
        "encrypted_openai_key": None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def manager(user_store, hasher) -> AuthManager:
    return AuthManager(
        users=user_store,
        hasher=hasher,
        auth_settings=AuthSettings(auth_namespace="notes", auth_database="prod"),
    )


def _event_types(mock_emit) -> list[EventType]:
    return [c.args[0].event_type for c in mock_emit.await_args_list]


class TestSignup:
    @pytest.mark.asyncio
    async def test_new_user(self, manager, user_store, hasher, db, mock_emit):
        user = await manager.signup(db, _payload())

        assert user.osm_id == "4242"
        assert user.last_login_at is None
        assert user.encrypted_openai_key is None
        assert user.id.startswith("user:")
        assert user.password != "\x01\x02\x03"
        assert hasher.verify(b"\x01\x02\x03", user.password)
        assert user_store.rows[user.id] == user
        assert _event_types(mock_emit) == [EventType.USER_SIGNED_UP]

    @pytest.mark.asyncio
    async def test_with_openai_key(self, manager, db, mock_emit):
        user = await manager.signup(db, _payload(encrypted_openai_key=[7, 7, 7]))
        assert user.encrypted_openai_key == b"\x07\x07\x07"
        assert mock_emit.await_args.args[0].data == {"has_openai_key": True}

    @pytest.mark.asyncio
    async def test_duplicate_osm_id(self, manager, db, mock_emit):
        await manager.signup(db, _payload())
        with pytest.raises(ConflictError, match="4242"):
            await manager.signup(db, _payload(password=[9]))

    @pytest.mark.asyncio
    async def test_wrong_namespace(self, manager, user_store, db, mock_emit):
        with pytest.raises(AuthenticationError, match="other/prod"):
            await manager.signup(db, _payload(NS="other"))
        assert user_store.rows == {}

    @pytest.mark.asyncio
    async def test_malformed_payload(self, manager, user_store, db, mock_emit):
        with pytest.raises(ValidationError) as exc_info:
            await manager.signup(db, _payload(password=[]))
        assert exc_info.value.path == "password"
        assert user_store.rows == {}
        mock_emit.assert_not_awaited()


class TestSignin:
    @pytest.mark.asyncio
    async def test_success_stamps_last_login(self, manager, user_store, db, mock_emit):
        created = await manager.signup(db, _payload())

        user = await manager.signin(db, _payload())

        assert user.id == created.id
        assert user.last_login_at is not None
        assert user_store.rows[user.id].last_login_at == user.last_login_at
        assert _event_types(mock_emit) == [EventType.USER_SIGNED_UP, EventType.USER_SIGNED_IN]

    @pytest.mark.asyncio
    async def test_wrong_password(self, manager, user_store, db, mock_emit):
        created = await manager.signup(db, _payload())

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await manager.signin(db, _payload(password=[3, 2, 1]))

        assert user_store.rows[created.id].last_login_at is None
        failed = mock_emit.await_args.args[0]
        assert failed.event_type == EventType.USER_SIGNIN_FAILED
        assert failed.data == {"reason": "bad_password"}

    @pytest.mark.asyncio
    async def test_unknown_user(self, manager, db, mock_emit):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await manager.signin(db, _payload(osm_id="9999"))
        failed = mock_emit.await_args.args[0]
        assert failed.user_id is None
        assert failed.data == {"reason": "unknown_user"}

    @pytest.mark.asyncio
    async def test_wrong_database(self, manager, db, mock_emit):
        await manager.signup(db, _payload())
        with pytest.raises(AuthenticationError):
            await manager.signin(db, _payload(DB="staging"))

    @pytest.mark.asyncio
    async def test_access_method_must_be_user(self, manager, db, mock_emit):
        with pytest.raises(ValidationError) as exc_info:
            await manager.signin(db, _payload(AC="admin"))
        assert exc_info.value.path == "AC"


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_signup_payload_creates_user_never_logged_in(self, user_store, hasher, db, mock_emit):
        manager = AuthManager(
            users=user_store,
            hasher=hasher,
            auth_settings=AuthSettings(auth_namespace="notes", auth_database="prod"),
        )
        payload = {
            "namespace": "notes",
            "database": "prod",
            "access_method": "user",
            "osm_id": "42",
            "password": [1, 2, 3],
            "encrypted_openai_key": None,
        }

        user = await manager.signup(db, payload)

        assert user.osm_id == "42"
        assert user.last_login_at is None
        assert (await user_store.get_by_osm_id(db, "42")) == user
