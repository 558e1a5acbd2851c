from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from notes_api.config import settings
from notes_api.db.base import create_request_supabase_client
from notes_api.db.outcome import run_remote

router = APIRouter()

SERVICE_NAME = "notes-tags-api"
SERVICE_VERSION = "0.1.0"


@router.get("")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        }
    )


@router.get("/ready")
async def readiness_check():
    """Readiness check endpoint; probes the notes table through PostgREST."""
    try:
        client = create_request_supabase_client()
    except Exception as e:
        db_status = f"error: {e}"
    else:
        outcome = await run_remote(lambda: client.table("notes").select("id").limit(1).execute())
        db_status = "connected" if outcome.ok else f"error: {outcome.error.message}"

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "database": db_status,
            "api_prefix": settings.api_prefix,
        }
    )
