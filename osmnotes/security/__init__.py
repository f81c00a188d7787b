"""Security module — content sealing and password hashing."""

from osmnotes.security.encryption import content_sealer
from osmnotes.security.passwords import password_hasher

__all__ = ["content_sealer", "password_hasher"]
