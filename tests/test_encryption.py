"""Tests for AES-256-GCM content sealing."""

from __future__ import annotations

import os

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from osmnotes.errors import DecryptionError
from osmnotes.schemas.content import parse_data_content, parse_note_content
from osmnotes.security.encryption import ContentSealer


@pytest.fixture
def key() -> bytes:
    return os.urandom(32)


@pytest.fixture
def sealer(key: bytes) -> ContentSealer:
    """Create a ContentSealer with a random key."""
    return ContentSealer(key)


@pytest.fixture
def note_content():
    return parse_note_content({
        "osm_object": {"type": "node", "id": "123456", "version": 3},
        "location": {"lat": 45.4642, "lng": 9.19},
        "title": "Fontanella — caffè",
    })


class TestContentSealer:
    """Round-trip and edge-case tests for ContentSealer."""

    def test_seal_open_round_trip(self, sealer: ContentSealer, note_content) -> None:
        blob = sealer.seal(note_content, record_id="note:1")
        assert isinstance(blob, bytes)
        assert b"Fontanella" not in blob
        payload = sealer.open(blob, record_id="note:1")
        assert parse_note_content(payload) == note_content

    def test_none_fields_omitted(self, sealer: ContentSealer) -> None:
        content = parse_data_content({"content": ""})
        payload = sealer.open(sealer.seal(content, record_id="data:1"), record_id="data:1")
        assert payload == {"content": ""}
        assert parse_data_content(payload) == content

    def test_different_nonces(self, sealer: ContentSealer, note_content) -> None:
        """Two seals of the same content should produce different blobs."""
        b1 = sealer.seal(note_content, record_id="note:1")
        b2 = sealer.seal(note_content, record_id="note:1")
        assert b1 != b2
        assert sealer.open(b1, record_id="note:1") == sealer.open(b2, record_id="note:1")

    def test_invalid_key_length(self) -> None:
        with pytest.raises(ValueError, match="32-byte"):
            ContentSealer(b"short")

    def test_too_short(self, sealer: ContentSealer) -> None:
        with pytest.raises(DecryptionError, match="too short"):
            sealer.open(b"\x00" * 27, record_id="note:1")

    def test_tampered_blob(self, sealer: ContentSealer, note_content) -> None:
        raw = bytearray(sealer.seal(note_content, record_id="note:1"))
        raw[-1] ^= 0xFF  # flip last byte
        with pytest.raises(DecryptionError):
            sealer.open(bytes(raw), record_id="note:1")

    def test_bound_to_record_id(self, sealer: ContentSealer, note_content) -> None:
        blob = sealer.seal(note_content, record_id="note:1")
        with pytest.raises(DecryptionError):
            sealer.open(blob, record_id="note:2")

    def test_wrong_key(self, note_content) -> None:
        blob = ContentSealer(os.urandom(32)).seal(note_content, record_id="note:1")
        with pytest.raises(DecryptionError):
            ContentSealer(os.urandom(32)).open(blob, record_id="note:1")

    def test_non_object_plaintext(self, sealer: ContentSealer, key: bytes) -> None:
        nonce = os.urandom(12)
        blob = nonce + AESGCM(key).encrypt(nonce, b"[1, 2]", b"note:1")
        with pytest.raises(DecryptionError, match="not a JSON object"):
            sealer.open(blob, record_id="note:1")

    def test_non_json_plaintext(self, sealer: ContentSealer, key: bytes) -> None:
        nonce = os.urandom(12)
        blob = nonce + AESGCM(key).encrypt(nonce, b"\xff\xfe", b"note:1")
        with pytest.raises(DecryptionError, match="not JSON"):
            sealer.open(blob, record_id="note:1")
