"""
User management service.
Handles registration, authentication and profile management.
"""

import logging

from ticketing.core.exceptions import AuthenticationError, ValidationError
from ticketing.db.repositories import UserRepository
from ticketing.models.user import User
from ticketing.schemas.auth import RegisterRequest, LoginRequest, ProfileUpdate, PasswordChange
from ticketing.services.password_manager import PasswordManager

logger = logging.getLogger(__name__)


class UserService:
    """
    User management service.
    Handles user registration, authentication, and profile management.
    """

    def __init__(self, password_manager: PasswordManager):
        self.password_manager = password_manager

    async def register_user(self, user_data: RegisterRequest, user_repo: UserRepository) -> User:
        """
        Register a new user.

        Args:
            user_data: Registration data with an already lowercased email
            user_repo: User repository instance

        Returns:
            Created user

        Raises:
            ValidationError: If the email is already registered
        """
        if user_repo.get_by_email(user_data.email):
            logger.warning(f"User registration failed: email {user_data.email} already exists")
            raise ValidationError("User with this email already exists")

        user = user_repo.create(
            email=user_data.email,
            password_hash=self.password_manager.hash_password(user_data.password),
            user_type=user_data.user_type,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
        )

        logger.info(f"User registered successfully: {user.email}")
        return user

    async def authenticate_user(self, login_data: LoginRequest, user_repo: UserRepository) -> User:
        """
        Authenticate a user with email and password.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = user_repo.get_by_email(login_data.email)
        if not user or not self.password_manager.verify_password(login_data.password, user.password_hash):
            logger.warning(f"Authentication failed for email {login_data.email}")
            raise AuthenticationError("Invalid email or password")

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def update_profile(self, user: User, profile_data: ProfileUpdate, user_repo: UserRepository) -> User:
        """Update the user's name and phone."""
        updated = user_repo.update(
            user,
            first_name=profile_data.first_name,
            last_name=profile_data.last_name,
            phone=profile_data.phone,
        )
        logger.info(f"Profile updated for user {user.id}")
        return updated

    async def change_password(self, user: User, password_data: PasswordChange, user_repo: UserRepository) -> None:
        """
        Change user password.

        Raises:
            AuthenticationError: If the current password is wrong
        """
        if not self.password_manager.verify_password(password_data.current_password, user.password_hash):
            logger.warning(f"Password change failed: invalid current password for user {user.id}")
            raise AuthenticationError("Current password is incorrect")

        user_repo.update(user, password_hash=self.password_manager.hash_password(password_data.new_password))
        logger.info(f"Password changed successfully for user {user.id}")


# Global user service instance
user_service = UserService(PasswordManager())
