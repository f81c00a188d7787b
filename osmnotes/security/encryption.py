"""AES-256-GCM sealing of note and data content.

The JSON form of a validated content model is encrypted with a fresh
12-byte nonce (96-bit, NIST recommended for GCM). The owning record id is
bound in as associated data, so a blob copied onto another record will not
open. Stored format: raw bytes nonce || ciphertext || tag.

Usage:
    from osmnotes.security.encryption import content_sealer

    blob = content_sealer.seal(note_content, record_id="note:abc")
    payload = content_sealer.open(blob, record_id="note:abc")  # dict, not yet validated
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from typing import Any, Protocol

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import BaseModel

from osmnotes.config import settings
from osmnotes.errors import DecryptionError

logger = logging.getLogger(__name__)

_NONCE_SIZE = 12  # 96-bit nonce for AES-GCM
_TAG_SIZE = 16


class EncryptionService(Protocol):
    """What the services need from an encryption backend."""

    def seal(self, content: BaseModel, *, record_id: str) -> bytes: ...

    def open(self, blob: bytes, *, record_id: str) -> dict[str, Any]: ...


class ContentSealer:
    """AES-256-GCM sealer for content models.

    Thread-safe and stateless (each seal call generates a fresh nonce).
    """

    def __init__(self, key: bytes) -> None:
        if len(key) != 32:
            msg = f"AES-256 requires a 32-byte key, got {len(key)} bytes"
            raise ValueError(msg)
        self._aesgcm = AESGCM(key)

    def seal(self, content: BaseModel, *, record_id: str) -> bytes:
        """Encrypt a validated content model. Returns nonce + ciphertext + tag."""
        plaintext = content.model_dump_json(exclude_none=True).encode("utf-8")
        nonce = os.urandom(_NONCE_SIZE)
        ct = self._aesgcm.encrypt(nonce, plaintext, record_id.encode("utf-8"))
        return nonce + ct

    def open(self, blob: bytes, *, record_id: str) -> dict[str, Any]:
        """Decrypt a sealed blob into its raw JSON object.

        The result is unvalidated; run it through the matching content schema.

        Raises:
            DecryptionError: on a short blob, wrong key, wrong record id,
                tampering, or a plaintext that is not a JSON object.
        """
        if len(blob) < _NONCE_SIZE + _TAG_SIZE:
            msg = "Sealed payload too short"
            raise DecryptionError(msg)
        nonce = blob[:_NONCE_SIZE]
        ct = blob[_NONCE_SIZE:]
        try:
            plaintext = self._aesgcm.decrypt(nonce, ct, record_id.encode("utf-8"))
        except InvalidTag as exc:
            msg = f"Sealed payload failed authentication for {record_id}"
            raise DecryptionError(msg) from exc
        try:
            payload = json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"Sealed payload for {record_id} is not JSON"
            raise DecryptionError(msg) from exc
        if not isinstance(payload, dict):
            msg = f"Sealed payload for {record_id} is not a JSON object"
            raise DecryptionError(msg)
        return payload


def _load_key() -> bytes:
    """Load the encryption key from settings (base64-encoded).

    Outside production a missing or malformed key falls back to a random
    ephemeral key; in production it is a startup error.
    """
    raw = settings.security.encryption_key
    problem: str | None = None
    key = b""
    if not raw:
        problem = "ENCRYPTION_KEY not set"
    else:
        try:
            key = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError):
            problem = "ENCRYPTION_KEY is not valid base64"
        else:
            if len(key) != 32:
                problem = f"ENCRYPTION_KEY decoded to {len(key)} bytes (expected 32)"

    if problem is None:
        return key
    if settings.is_production:
        raise RuntimeError(problem)
    logger.warning("%s — using a random ephemeral key (data won't survive restarts)", problem)
    return os.urandom(32)


# Module-level singleton - import this wherever sealing is needed.
content_sealer = ContentSealer(_load_key())
