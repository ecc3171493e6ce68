"""Security: JWT access tokens and password hashing."""

from app.infrastructure.security.jwt import create_access_token, decode_access_token
from app.infrastructure.security.password import BcryptPasswordHasher

__all__ = [
    "BcryptPasswordHasher",
    "create_access_token",
    "decode_access_token",
]
