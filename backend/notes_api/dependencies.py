from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notes_api.core.exceptions import AuthError
from notes_api.core.repositories.implementations.supabase.note_repository import (
    SupabaseNoteRepository,
)
from notes_api.core.repositories.implementations.supabase.tag_repository import (
    SupabaseTagRepository,
)
from notes_api.core.schemas.auth import AuthUser
from notes_api.core.services.auth_service import AuthService
from notes_api.core.services.note_service import NoteService
from notes_api.core.services.tag_service import TagService
from notes_api.db.base import create_request_supabase_client
from notes_api.utils.logging import get_logger

logger = get_logger(__name__)

# Use auto_error=False to handle missing tokens gracefully
http_bearer = HTTPBearer(auto_error=False)

if TYPE_CHECKING:
    from supabase import Client

    from notes_api.core.repositories.note_repository import NoteRepository
    from notes_api.core.repositories.tag_repository import TagRepository


def get_request_supabase_client(request: Request) -> Client:
    """Create a request-scoped Supabase client and set PostgREST bearer.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    auth_header = request.headers.get("authorization")
    jwt: str | None = None
    if auth_header and auth_header.lower().startswith("bearer "):
        jwt = auth_header.split(" ", 1)[1].strip()
    return create_request_supabase_client(jwt)


def get_note_repository(client: Client = Depends(get_request_supabase_client)) -> NoteRepository:
    """Get a request-scoped note repository instance using request client."""
    return SupabaseNoteRepository(client)


def get_tag_repository(client: Client = Depends(get_request_supabase_client)) -> TagRepository:
    """Get a request-scoped tag repository instance using request client."""
    return SupabaseTagRepository(client)


def get_note_service(
    notes: NoteRepository = Depends(get_note_repository),
    tags: TagRepository = Depends(get_tag_repository),
) -> NoteService:
    """Get a request-scoped note service instance."""
    return NoteService(notes, tags)


def get_tag_service(tags: TagRepository = Depends(get_tag_repository)) -> TagService:
    """Get a request-scoped tag service instance."""
    return TagService(tags)


def get_auth_service(client: Client = Depends(get_request_supabase_client)) -> AuthService:
    """Get a request-scoped auth service instance."""
    return AuthService(client)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
) -> AuthUser:
    """Validate JWT via Supabase and return authenticated user."""
    if not credentials:
        raise AuthError("Authentication required")
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise AuthError("Invalid token format")

    supabase = get_request_supabase_client(request)
    try:
        resp = await asyncio.to_thread(lambda: supabase.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] if error_msg else "Unknown error",
                "jwt_length": len(jwt),
            }
        )
        if "invalid" in error_msg or "expired" in error_msg:
            raise AuthError("Token is invalid or expired") from err
        raise AuthError("Authentication failed") from err

    user = getattr(resp, "user", None)
    user_id = getattr(user, "id", None)
    if not user or not user_id:
        raise AuthError("Invalid user data")
    return AuthUser(
        id=user_id,
        email=getattr(user, "email", None) or "",
        role=getattr(user, "role", None),
    )
