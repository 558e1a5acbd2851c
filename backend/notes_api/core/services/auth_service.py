from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from notes_api.api.v1.schemas.auth import SessionRead, UserRead
from notes_api.core.exceptions import AuthError, UpstreamError, ValidationError
from notes_api.utils.logging import get_logger
from notes_api.utils.validation import validate_password_strength

if TYPE_CHECKING:
    from notes_api.api.v1.schemas.auth import LoginRequest, RegisterRequest


logger = get_logger(__name__)


class AuthService:
    """Authentication service delegating to Supabase Auth."""

    def __init__(self, supabase_client: Any):
        self.supabase = supabase_client

    async def register(self, payload: RegisterRequest) -> UserRead:
        """Create an account. Email confirmation, if enabled, happens out of band."""
        is_valid_password, password_error = validate_password_strength(payload.password)
        if not is_valid_password:
            raise ValidationError(password_error or "Password is too weak")

        email = payload.email.lower().strip()
        password = payload.password

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.sign_up({
                    "email": email,
                    "password": password,
                })
            )
        except Exception as err:
            error_msg = str(err).lower()

            logger.warning(
                "Sign up failed",
                extra={
                    "email": email,
                    "error_type": type(err).__name__,
                    "error_summary": error_msg[:100] if error_msg else "Unknown error",
                }
            )

            if any(
                phrase in error_msg
                for phrase in ("signup disabled", "signups disabled", "signups not allowed", "signup not allowed")
            ):
                message = "Signups are disabled"
            elif "already registered" in error_msg or "already exists" in error_msg:
                message = "An account with this email already exists"
            elif "invalid email" in error_msg:
                message = "Invalid email format"
            elif "weak password" in error_msg:
                message = "Password does not meet security requirements"
            else:
                message = "Please try again"
            raise UpstreamError("register user", message, client_error=True) from err

        if not getattr(resp, "user", None):
            raise UpstreamError("register user", "No user returned by the auth provider", client_error=True)

        logger.info("User registered", extra={"user_id": str(resp.user.id)})
        return UserRead(id=str(resp.user.id), email=resp.user.email or "")

    async def login(self, payload: LoginRequest) -> SessionRead:
        """Exchange email and password for a session."""
        email = payload.email.lower().strip()
        password = payload.password

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.sign_in_with_password({
                    "email": email,
                    "password": password,
                })
            )
        except Exception as err:
            error_msg = str(err).lower()

            logger.warning(
                "Sign in failed",
                extra={
                    "email": email,
                    "error_type": type(err).__name__,
                    "error_summary": error_msg[:100] if error_msg else "Unknown error",
                }
            )

            if "email not confirmed" in error_msg:
                raise AuthError("Please confirm your email address before signing in") from err
            if "too many requests" in error_msg:
                raise AuthError("Too many signin attempts. Please try again later.") from err
            raise AuthError("Invalid email or password") from err

        session = getattr(resp, "session", None)
        if not getattr(resp, "user", None) or not session:
            raise AuthError("Invalid email or password")

        logger.info("User signed in", extra={"user_id": str(resp.user.id)})

        return SessionRead(
            access_token=session.access_token,
            token_type="bearer",
            expires_in=session.expires_in,
            refresh_token=session.refresh_token,
            user=UserRead(id=str(resp.user.id), email=resp.user.email or ""),
        )
