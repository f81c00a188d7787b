"""Signup and signin against stored users.

The payload's `password` is already the client-derived key; it is hashed
again (Scrypt) before storage and compared against that hash on signin.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from osmnotes.config import AuthSettings, settings
from osmnotes.db.store import UserStore, user_store
from osmnotes.errors import AuthenticationError, ConflictError
from osmnotes.events import emit
from osmnotes.schemas.auth import SigninParams, SigninParamsSchema, SignupParams, SignupParamsSchema
from osmnotes.schemas.events import EventType, SystemEvent
from osmnotes.schemas.ids import USER_TABLE, new_record_id
from osmnotes.schemas.records import UserRecord, UserRecordSchema
from osmnotes.security.passwords import KeyDerivationService, password_hasher

logger = logging.getLogger(__name__)


class AuthManager:
    """Stateless auth operations — AsyncSession passed per call."""

    def __init__(
        self,
        users: UserStore = user_store,
        hasher: KeyDerivationService = password_hasher,
        auth_settings: AuthSettings | None = None,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._auth = auth_settings or settings.auth

    async def signup(self, db: AsyncSession, raw: Any) -> UserRecord:
        """Create the user for a new OSM identity.

        Raises:
            ValidationError: malformed payload.
            AuthenticationError: payload targets another namespace/database.
            ConflictError: `osm_id` already has a user.
        """
        params = SignupParamsSchema.parse(raw)
        self._check_target(params)

        if await self._users.get_by_osm_id(db, params.osm_id) is not None:
            msg = f"User already exists for osm_id {params.osm_id}"
            raise ConflictError(msg)

        user = UserRecordSchema.parse({
            "id": new_record_id(USER_TABLE),
            "osm_id": params.osm_id,
            "password": self._hasher.hash(params.password),
            "encrypted_openai_key": params.encrypted_openai_key,
            "created_at": datetime.now(UTC),
            "last_login_at": None,
        })
        user = await self._users.put(db, user)

        await emit(SystemEvent(
            event_type=EventType.USER_SIGNED_UP,
            user_id=user.id,
            data={"has_openai_key": user.encrypted_openai_key is not None},
            source_module="services.auth",
        ))
        logger.info("User signed up: user=%s", user.id)
        return user

    async def signin(self, db: AsyncSession, raw: Any) -> UserRecord:
        """Verify credentials and stamp `last_login_at`.

        Raises:
            ValidationError: malformed payload.
            AuthenticationError: unknown osm_id, wrong password, or wrong target.
        """
        params = SigninParamsSchema.parse(raw)
        self._check_target(params)

        user = await self._users.get_by_osm_id(db, params.osm_id)
        if user is None or not self._hasher.verify(params.password, user.password):
            await emit(SystemEvent(
                event_type=EventType.USER_SIGNIN_FAILED,
                user_id=user.id if user is not None else None,
                data={"reason": "unknown_user" if user is None else "bad_password"},
                source_module="services.auth",
            ))
            logger.info("Signin rejected for osm_id=%s", params.osm_id)
            msg = "Invalid credentials"
            raise AuthenticationError(msg)

        user = await self._users.put(
            db, user.model_copy(update={"last_login_at": datetime.now(UTC)})
        )

        await emit(SystemEvent(
            event_type=EventType.USER_SIGNED_IN,
            user_id=user.id,
            source_module="services.auth",
        ))
        logger.info("User signed in: user=%s", user.id)
        return user

    def _check_target(self, params: SignupParams | SigninParams) -> None:
        if params.namespace != self._auth.auth_namespace or params.database != self._auth.auth_database:
            msg = f"Unknown auth target {params.namespace}/{params.database}"
            raise AuthenticationError(msg)


# Module-level singleton
auth_manager = AuthManager()
