from __future__ import annotations

from fastapi import APIRouter

from fairway.api.health import router as health_router
from fairway.api.profitability import router as profitability_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(profitability_router)
