"""
JWT token service.
Issues and verifies bearer tokens carrying the user id and user type.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from ticketing.core.config import config
from ticketing.models.user import User
from ticketing.schemas.auth import TokenData

logger = logging.getLogger(__name__)


class JWTService:
    """
    JWT token service.
    Configuration is loaded lazily from the secrets manager.
    """

    def __init__(self):
        self.secret_key: Optional[str] = None
        self.algorithm: Optional[str] = None
        self.expiry_days: Optional[int] = None
        self._initialized = False

    async def initialize(self):
        """Initialize JWT configuration from secrets."""
        self.secret_key = await config.get_jwt_secret()
        self.algorithm = await config.get_jwt_algorithm()
        self.expiry_days = await config.get_jwt_expiry_days()
        self._initialized = True
        logger.info("JWT service initialized")

    def create_access_token(self, user: User) -> str:
        """
        Create a signed access token for a user.

        Args:
            user: Authenticated user

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        payload = {
            "user_id": user.id,
            "user_type": user.user_type.value,
            "iat": now,
            "exp": now + timedelta(days=self.expiry_days),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Optional[TokenData]:
        """
        Verify and decode a JWT token.

        Returns:
            Token data, or None if the token is invalid or expired
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return TokenData(user_id=payload.get("user_id"), user_type=payload.get("user_type"))
        except JWTError as e:
            logger.warning(f"Token verification failed: {e}")
            return None
        except PydanticValidationError:
            logger.warning("Token payload is missing user claims")
            return None


# Global JWT service instance
jwt_service = JWTService()
