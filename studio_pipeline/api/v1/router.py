"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from studio_pipeline.api.v1 import health, promises, quotes
from studio_pipeline.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(promises.router)
api_router.include_router(quotes.router)


def get_api_router() -> APIRouter:
    return api_router
