# -*- coding: utf-8 -*-
"""Health-data sync — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class HealthWorkoutType(str, Enum):
    functional_strength = "functional_strength"
    traditional_strength = "traditional_strength"
    core_training = "core_training"
    running = "running"
    walking = "walking"
    cycling = "cycling"
    swimming = "swimming"
    rowing = "rowing"
    stair_climbing = "stair_climbing"
    elliptical = "elliptical"


class HealthWorkoutRecord(BaseModel):
    start_time: str
    end_time: str
    activity_type: HealthWorkoutType
    duration_seconds: float = Field(..., ge=0)
    total_energy_kcal: float = Field(0.0, ge=0)
    metadata: Dict[str, object] = Field(default_factory=dict)


class HealthSyncRequest(BaseModel):
    source: str = "beat-the-logbook"
    workouts: List[HealthWorkoutRecord] = []


class HealthSyncStatus(BaseModel):
    available: bool
    enabled: bool
    endpoint: Optional[str] = None


class HealthSyncResult(BaseModel):
    workout_id: str
    synced: bool
    record: Optional[HealthWorkoutRecord] = None
