"""
Password hashing service.
Wraps passlib's bcrypt context.
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordManager:
    """Hashes and verifies user passwords with bcrypt."""

    def __init__(self):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def hash_password(self, password: str) -> str:
        """Hash a plain text password."""
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain text password against a stored hash.

        Returns:
            True if the password matches, False otherwise or if the hash is malformed
        """
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification failed on malformed hash: {e}")
            return False
