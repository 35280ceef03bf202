"""
Dependency injection for the Ticketing Service.
Provides repositories, services and authentication dependencies.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ticketing.db.database import get_db
from ticketing.db.repositories import UserRepository
from ticketing.models.user import User
from ticketing.services.booking_service import BookingService, booking_service
from ticketing.services.jwt_service import JWTService, jwt_service

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """
    Get user repository dependency.

    Args:
        db: Database session

    Returns:
        User repository instance
    """
    return UserRepository(db)


async def get_jwt_service() -> JWTService:
    """
    Get JWT service dependency.

    Returns:
        Initialized JWT service instance
    """
    if not jwt_service._initialized:
        await jwt_service.initialize()
    return jwt_service


async def get_booking_service() -> BookingService:
    """
    Get booking service dependency with its payment gateway selected.

    Returns:
        Initialized booking service instance
    """
    await booking_service.initialize()
    return booking_service


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    jwt_svc: JWTService = Depends(get_jwt_service),
    user_repo: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Get current authenticated user dependency.

    Args:
        credentials: HTTP authorization credentials
        jwt_svc: JWT service
        user_repo: User repository

    Returns:
        Current authenticated user

    Raises:
        HTTPException: If authentication fails
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    token_data = jwt_svc.verify_token(credentials.credentials)
    if token_data is None:
        raise credentials_exception

    user = user_repo.get_by_id(token_data.user_id)
    if user is None:
        logger.warning(f"Token references unknown user {token_data.user_id}")
        raise credentials_exception

    return user


async def get_current_organizer(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current organizer dependency.

    Raises:
        HTTPException: If the user is not an organizer
    """
    if not current_user.is_organizer:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Organizer role required."
        )
    return current_user
