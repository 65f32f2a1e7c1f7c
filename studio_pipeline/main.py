"""Application entrypoint for the FastAPI service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from studio_pipeline.api.v1.router import get_api_router
from studio_pipeline.core.config import get_config
from studio_pipeline.core.startup import bootstrap


@asynccontextmanager
async def lifespan(_app: FastAPI):
    bootstrap()
    yield


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=lifespan)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Expose ASGI app for `uvicorn studio_pipeline.main:app`.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("studio_pipeline.main:app", host="0.0.0.0", port=8000)
