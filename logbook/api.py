# -*- coding: utf-8 -*-
"""
Beat the Logbook API

Workout logging with Strong imports, exercise statistics, a nutrition
diary backed by online food lookup, and nicotine tracking.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .app_db import init_app_db
from .config import settings
from .healthsync.api import router as health_sync_router
from .imports.api import router as import_router
from .nicotine.api import router as nicotine_router
from .nutrition.api import router as nutrition_router
from .preferences.api import router as settings_router
from .workouts.api import active_router, exercises_router, templates_router
from .workouts.api import router as workouts_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Beat the Logbook",
    description="Workout log, nutrition diary and nicotine tracker",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Ensure the DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.db_path)

app.include_router(workouts_router)
app.include_router(templates_router)
app.include_router(active_router)
app.include_router(exercises_router)
app.include_router(settings_router)
app.include_router(import_router)
app.include_router(nutrition_router)
app.include_router(health_sync_router)
app.include_router(nicotine_router)


@app.get("/api/health")
def health_check():
    return {
        "status": "ok",
        "nutrition_provider": settings.nutrition_provider,
        "health_sync": bool(settings.health_sync_url),
    }


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting on %s:%d (db: %s)", settings.host, settings.port, settings.db_path)
    uvicorn.run("logbook.api:app", host=settings.host, port=settings.port, reload=False)
