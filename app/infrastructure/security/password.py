"""Password hashing for staff logins (bcrypt over a SHA-256 pre-hash).

bcrypt only reads the first 72 bytes of its input. Hashing the password
with SHA-256 first (base64, 44 bytes) lets long passphrases count in full.
"""

import base64
import hashlib

import bcrypt


class BcryptPasswordHasher:
    """Implements IPasswordHasher. rounds is the bcrypt cost factor."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    @staticmethod
    def _prehash(password: str) -> bytes:
        return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._prehash(password), salt).decode("utf-8")

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """False for a mismatch and for a malformed stored hash."""
        try:
            return bool(
                bcrypt.checkpw(self._prehash(password), hashed_password.encode("utf-8"))
            )
        except (ValueError, TypeError):
            return False
