"""Password derivation and storage hashing.

Two steps, never mixed up:

1. `derive(secret, osm_id=...)` — PBKDF2-HMAC-SHA256 over the user's secret
   with a salt bound to the auth namespace and osm_id. Its output is what
   travels as `password` in signup/signin payloads.
2. `hash(derived)` — Scrypt with a random salt, stored in
   UserRecord.password as "scrypt$n$r$p$salt$digest" (base64 parts).
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import os
from typing import Protocol

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from osmnotes.config import Settings, settings

logger = logging.getLogger(__name__)

_KEY_LENGTH = 32
_SALT_SIZE = 16
_SCHEME = "scrypt"


class KeyDerivationService(Protocol):
    """What the auth layer needs from a password backend."""

    def derive(self, secret: str | bytes, *, osm_id: str) -> bytes: ...

    def hash(self, derived: bytes) -> str: ...

    def verify(self, derived: bytes, hashed: str) -> bool: ...


class PasswordHasher:
    """PBKDF2 derivation + Scrypt storage hash."""

    def __init__(
        self,
        *,
        namespace: str,
        iterations: int,
        scrypt_n: int,
        scrypt_r: int,
        scrypt_p: int,
    ) -> None:
        self._namespace = namespace
        self._iterations = iterations
        self._n = scrypt_n
        self._r = scrypt_r
        self._p = scrypt_p

    @classmethod
    def from_settings(cls, cfg: Settings) -> PasswordHasher:
        return cls(
            namespace=cfg.auth.auth_namespace,
            iterations=cfg.security.kdf_iterations,
            scrypt_n=cfg.security.scrypt_n,
            scrypt_r=cfg.security.scrypt_r,
            scrypt_p=cfg.security.scrypt_p,
        )

    def derive(self, secret: str | bytes, *, osm_id: str) -> bytes:
        """Derive the 32-byte password sent in auth payloads."""
        if not osm_id:
            msg = "osm_id is required to derive a password"
            raise ValueError(msg)
        raw = secret.encode("utf-8") if isinstance(secret, str) else secret
        if not raw:
            msg = "Cannot derive a password from an empty secret"
            raise ValueError(msg)
        salt = hashlib.sha256(f"{self._namespace}:{osm_id}".encode()).digest()
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=_KEY_LENGTH,
            salt=salt,
            iterations=self._iterations,
        )
        return kdf.derive(raw)

    def hash(self, derived: bytes) -> str:
        """Hash derived password bytes for storage."""
        if not derived:
            msg = "Cannot hash an empty derived password"
            raise ValueError(msg)
        salt = os.urandom(_SALT_SIZE)
        digest = self._scrypt(salt, self._n, self._r, self._p).derive(derived)
        return "$".join((
            _SCHEME,
            str(self._n),
            str(self._r),
            str(self._p),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(digest).decode("ascii"),
        ))

    def verify(self, derived: bytes, hashed: str) -> bool:
        """Constant-time check of derived bytes against a stored hash.

        Parameters are read from the stored string, so hashes made with older
        cost settings keep verifying.
        """
        parts = hashed.split("$")
        if len(parts) != 6 or parts[0] != _SCHEME:
            logger.warning("Stored password hash has an unknown format")
            return False
        try:
            n, r, p = int(parts[1]), int(parts[2]), int(parts[3])
            salt = base64.b64decode(parts[4], validate=True)
            digest = base64.b64decode(parts[5], validate=True)
        except (ValueError, binascii.Error):
            logger.warning("Stored password hash is malformed")
            return False
        try:
            self._scrypt(salt, n, r, p).verify(derived, digest)
        except InvalidKey:
            return False
        except ValueError:
            logger.warning("Stored password hash has invalid scrypt parameters")
            return False
        return True

    @staticmethod
    def _scrypt(salt: bytes, n: int, r: int, p: int) -> Scrypt:
        return Scrypt(salt=salt, length=_KEY_LENGTH, n=n, r=r, p=p)


# Module-level singleton - import this wherever password hashing is needed.
password_hasher = PasswordHasher.from_settings(settings)
