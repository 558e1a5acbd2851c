from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, status

from notes_api.api.v1.schemas.auth import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
)
from notes_api.dependencies import (
    get_auth_service,
    get_current_user,
)

if TYPE_CHECKING:
    from notes_api.core.schemas.auth import AuthUser
    from notes_api.core.services.auth_service import AuthService

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        500: {"description": "Internal server error"},
    }
)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user with email and password."""
    user = await auth_service.register(payload)
    return RegisterResponse(user=user)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Log in with email and password and receive a bearer token."""
    session = await auth_service.login(payload)
    return LoginResponse(session=session)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(current_user: AuthUser = Depends(get_current_user)):
    """Return the identity behind the bearer token."""
    return ProfileResponse(user=current_user)
