"""API v1 routing configuration.

This module defines all v1 API routes.
"""

from fastapi import APIRouter

from aioffice.api.v1 import runs, workflows

router = APIRouter()

# Domain routers
router.include_router(workflows.router, prefix="/workflows", tags=["Workflows"])
router.include_router(runs.router, prefix="/runs", tags=["Runs"])


@router.get("/status", tags=["Status"])
async def api_status() -> dict[str, str]:
    """API v1 status check."""
    return {"status": "ok", "version": "v1"}
