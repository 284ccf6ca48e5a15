"""Password hashing utilities using bcrypt.

Example:
    >>> hasher = PasswordHasher(rounds=4)
    >>> hashed = hasher.hash("correct horse")
    >>> hasher.verify("correct horse", hashed)
    True
"""

from __future__ import annotations

import bcrypt
import structlog

from cyberguard.utils.validators import MAX_PASSWORD_BYTES, password_too_long

logger = structlog.get_logger(__name__)


class PasswordHasher:
    """Secure password hashing using bcrypt.

    Attributes:
        rounds: Cost factor passed to bcrypt.gensalt (4-31).
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password to hash.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            ValueError: If password is empty or longer than bcrypt accepts.
        """
        if not password:
            raise ValueError("Password cannot be empty")
        if password_too_long(password):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Returns:
            True if password matches the hash, False otherwise (including
            for malformed hashes).
        """
        if not password or not password_hash or password_too_long(password):
            return False

        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.warning("password_verification_failed", error=str(e))
            return False
