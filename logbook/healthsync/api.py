# -*- coding: utf-8 -*-
"""Health-data sync — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..workouts.storage import get_workout_by_id
from .models import HealthSyncResult, HealthSyncStatus, HealthWorkoutRecord
from .service import build_health_record, is_health_available, is_sync_enabled, save_workout_to_health

router = APIRouter(prefix="/api/health-sync", tags=["Health sync"])


@router.get("/status", response_model=HealthSyncStatus, summary="Health sync availability")
def status():
    return HealthSyncStatus(
        available=is_health_available(),
        enabled=is_sync_enabled(),
        endpoint=settings.health_sync_url,
    )


@router.get("/workouts/{workout_id}/record", response_model=HealthWorkoutRecord, summary="Preview the health record for a workout")
def preview_record(workout_id: str):
    workout = get_workout_by_id(workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    return build_health_record(workout)


@router.post("/workouts/{workout_id}", response_model=HealthSyncResult, summary="Sync a stored workout now")
def sync_workout(workout_id: str):
    workout = get_workout_by_id(workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    if not is_health_available():
        raise HTTPException(status_code=409, detail="Health sync endpoint not configured")
    synced = save_workout_to_health(workout)
    return HealthSyncResult(workout_id=workout_id, synced=synced, record=build_health_record(workout))
