"""
Authentication endpoints for the Ticketing Service.
"""

import logging

from fastapi import APIRouter, Depends, status

from ticketing.api.dependencies import get_current_user, get_jwt_service, get_user_repository
from ticketing.db.repositories import UserRepository
from ticketing.models.user import User
from ticketing.schemas.auth import (
    LoginRequest, PasswordChange, ProfileUpdate, RegisterRequest, UserResponse
)
from ticketing.services.jwt_service import JWTService
from ticketing.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    user_repo: UserRepository = Depends(get_user_repository),
    jwt_svc: JWTService = Depends(get_jwt_service),
):
    """
    Register a new user and issue a token.

    Returns:
        Token and public user data
    """
    user = await user_service.register_user(user_data, user_repo)
    return {
        "success": True,
        "message": "Registration successful",
        "token": jwt_svc.create_access_token(user),
        "user": UserResponse.model_validate(user),
    }


@router.post("/login")
async def login(
    login_data: LoginRequest,
    user_repo: UserRepository = Depends(get_user_repository),
    jwt_svc: JWTService = Depends(get_jwt_service),
):
    """Authenticate with email and password."""
    user = await user_service.authenticate_user(login_data, user_repo)
    return {
        "success": True,
        "message": "Login successful",
        "token": jwt_svc.create_access_token(user),
        "user": UserResponse.model_validate(user),
    }


@router.post("/logout")
async def logout():
    """Tokens are stateless; the client discards its token."""
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": UserResponse.model_validate(current_user)}


@router.put("/profile")
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    user_repo: UserRepository = Depends(get_user_repository),
):
    """Update the current user's name and phone."""
    user = await user_service.update_profile(current_user, profile_data, user_repo)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": UserResponse.model_validate(user),
    }


@router.put("/change-password")
async def change_password(
    password_data: PasswordChange,
    current_user: User = Depends(get_current_user),
    user_repo: UserRepository = Depends(get_user_repository),
):
    await user_service.change_password(current_user, password_data, user_repo)
    return {"success": True, "message": "Password changed successfully"}
