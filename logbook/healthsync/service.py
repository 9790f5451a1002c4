# -*- coding: utf-8 -*-
"""Health-data sync — workout classification, energy estimate and upload."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import Optional

import httpx

from ..config import settings
from ..dates import parse_instant, to_iso, utc_now
from ..preferences.storage import get_health_sync_enabled
from ..workouts.models import Workout
from .models import HealthSyncRequest, HealthWorkoutRecord, HealthWorkoutType

logger = logging.getLogger(__name__)

WORKOUT_NAME = "Beat the Logbook Workout"

# Rough energy model; the health platform refines it with real body data.
_BASE_MET = 3.5
_AVG_WEIGHT_KG = 70

_CARDIO_KEYWORDS = (
    (("run", "jog"), HealthWorkoutType.running),
    (("walk",), HealthWorkoutType.walking),
    (("cycle", "bike"), HealthWorkoutType.cycling),
    (("swim",), HealthWorkoutType.swimming),
    (("row",), HealthWorkoutType.rowing),
    (("stair", "step"), HealthWorkoutType.stair_climbing),
    (("elliptical",), HealthWorkoutType.elliptical),
)

# Strength keywords win over cardio ones ("barbell row" is strength).
_STRENGTH_KEYWORDS = (
    "bench", "press", "chest", "shoulder", "tricep", "fly",
    "squat", "leg", "lunge", "deadlift", "hip thrust", "calf",
    "pull up", "pull-up", "chin up", "row", "curl", "bicep",
)
_CORE_KEYWORDS = ("core", "ab", "plank", "crunch")


def is_health_available() -> bool:
    return bool(settings.health_sync_url)


def is_sync_enabled() -> bool:
    return get_health_sync_enabled()


def classify_activity(exercise_name: str) -> HealthWorkoutType:
    name = (exercise_name or "").lower()
    activity = HealthWorkoutType.functional_strength
    for keywords, kind in _CARDIO_KEYWORDS:
        if any(k in name for k in keywords):
            activity = kind
            break
    if any(k in name for k in _STRENGTH_KEYWORDS):
        activity = HealthWorkoutType.traditional_strength
    elif any(k in name for k in _CORE_KEYWORDS):
        activity = HealthWorkoutType.core_training
    return activity


def classify_workout(workout: Workout) -> HealthWorkoutType:
    """Most common activity among the exercises; ties go to the earliest exercise."""
    if not workout.exercises:
        return HealthWorkoutType.functional_strength
    kinds = [classify_activity(ex.name) for ex in workout.exercises]
    counts = Counter(kinds)
    top = max(counts.values())
    return next(k for k in kinds if counts[k] == top)


def estimate_calories(duration_seconds: float, exercise_count: int) -> int:
    per_minute = _BASE_MET * 3.5 * _AVG_WEIGHT_KG / 200
    intensity = 1 + exercise_count * 0.05
    return int(round(per_minute * (duration_seconds / 60) * intensity))


def build_health_record(workout: Workout) -> HealthWorkoutRecord:
    duration = float(workout.duration or 0)
    start = parse_instant(workout.start_time) or parse_instant(workout.date) or utc_now()
    end = start + timedelta(seconds=duration)
    return HealthWorkoutRecord(
        start_time=to_iso(start),
        end_time=to_iso(end),
        activity_type=classify_workout(workout),
        duration_seconds=duration,
        total_energy_kcal=estimate_calories(duration, len(workout.exercises)),
        metadata={
            "workout_id": workout.id,
            "workout_name": WORKOUT_NAME,
            "exercises": [ex.name for ex in workout.exercises],
        },
    )


def _headers() -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if settings.health_sync_token:
        headers["Authorization"] = f"Bearer {settings.health_sync_token}"
    return headers


def save_workout_to_health(workout: Workout, *, transport: Optional[httpx.BaseTransport] = None) -> bool:
    """Upload one workout. Failures are logged and reported as False."""
    if not is_health_available():
        logger.info("Health sync endpoint not configured; skipping workout %s", workout.id)
        return False
    record = build_health_record(workout)
    payload = HealthSyncRequest(workouts=[record]).model_dump(mode="json")
    try:
        with httpx.Client(timeout=settings.health_sync_timeout, transport=transport) as client:
            resp = client.post(str(settings.health_sync_url), json=payload, headers=_headers())
            resp.raise_for_status()
    except httpx.HTTPError as exc:
        logger.error("Health sync failed for workout %s: %s", workout.id, exc)
        return False
    logger.info("Synced workout %s to health (%s)", workout.id, record.activity_type.value)
    return True


def sync_workout_to_health(workout: Workout, *, transport: Optional[httpx.BaseTransport] = None) -> bool:
    if not is_sync_enabled():
        return False
    return save_workout_to_health(workout, transport=transport)
