"""HTTP API, mounted by ``create_app`` under ``API_V1_PREFIX``."""

from fastapi import APIRouter

from aioffice.api.v1 import router as v1_router

router = APIRouter()
router.include_router(v1_router)

__all__ = ["router"]
