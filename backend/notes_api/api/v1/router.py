from __future__ import annotations

from fastapi import APIRouter

from .endpoints import auth, health, notes, tags

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(notes.router, prefix="/notes", tags=["Notes"])
api_router.include_router(tags.router, prefix="/tags", tags=["Tags"])
