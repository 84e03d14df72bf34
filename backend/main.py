"""
FastAPI application: /api/v1 match, stats, notification and meta routes.

Startup opens the database, loads notifications and matches (rebuilding live and
completed matches from their event logs) and installs the controller that the
routes depend on. Shutdown uninstalls it and disposes the engine.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.database import dispose_database, init_database
from core.dependencies import init_services, reset_services
from core.logging import setup_logging
from routes.api_v1 import api_v1_router

settings = get_settings()
setup_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

app.include_router(api_v1_router)


@app.on_event("startup")
async def on_startup() -> None:
    await init_database(settings.database_url)
    controller = await init_services(settings)
    logger.info(
        "%s ready: %d matches loaded, optimistic_updates=%s",
        settings.app_name,
        len(controller.list_matches()),
        controller.optimistic,
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    reset_services()
    await dispose_database()
    logger.info("%s stopped", settings.app_name)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
