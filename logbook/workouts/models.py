# -*- coding: utf-8 -*-
"""Workouts — Pydantic models."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..preferences.models import WeightUnit, normalize_weight_unit


class WorkoutSet(BaseModel):
    id: str
    # Kept as entered; numeric interpretation happens in the stats layer.
    weight: str = "0"
    reps: str = "0"

    @field_validator("weight", "reps", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> str:
        if value is None:
            return "0"
        return str(value)


class Exercise(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    sets: List[WorkoutSet] = Field(default_factory=list)


class Workout(BaseModel):
    id: str
    date: str = Field(..., description="ISO8601 timestamp")
    exercises: List[Exercise] = Field(default_factory=list)
    start_time: Optional[str] = None
    duration: Optional[float] = Field(None, ge=0, description="seconds")
    weight_unit: WeightUnit = WeightUnit.kg

    @field_validator("weight_unit", mode="before")
    @classmethod
    def _coerce_weight_unit(cls, value: object) -> WeightUnit:
        return normalize_weight_unit(value)


class WorkoutCreateRequest(BaseModel):
    exercises: List[Exercise] = Field(..., min_length=1)
    start_time: Optional[str] = None
    duration: Optional[float] = Field(None, ge=0)
    weight_unit: Optional[WeightUnit] = None


class WorkoutCreateResponse(BaseModel):
    id: str
    health_sync_scheduled: bool = False


class WorkoutUpdateRequest(BaseModel):
    workout: Workout
    new_weight_unit: Optional[WeightUnit] = None


class WorkoutListResponse(BaseModel):
    count: int
    workouts: List[Workout]


class WorkoutTemplate(BaseModel):
    id: str
    name: str
    exercises: List[Exercise] = Field(default_factory=list)


class TemplateCreateRequest(BaseModel):
    workout_id: str
    name: str = Field(..., min_length=1, max_length=200)


class ActiveWorkout(BaseModel):
    exercises: List[Exercise] = Field(default_factory=list)
    timestamp: Optional[str] = None
    weight_unit: WeightUnit = WeightUnit.kg

    @field_validator("weight_unit", mode="before")
    @classmethod
    def _coerce_weight_unit(cls, value: object) -> WeightUnit:
        return normalize_weight_unit(value)


class ActiveWorkoutRequest(BaseModel):
    exercises: List[Exercise] = Field(default_factory=list)
    weight_unit: Optional[WeightUnit] = None


class WorkoutCalendarResponse(BaseModel):
    year: int
    month: int
    days: Dict[str, int] = Field(default_factory=dict, description="YYYY-MM-DD -> workout count")


# ---- Exercise statistics ----


class ExerciseSetStat(BaseModel):
    date: str
    reps: str
    weight: str


class WorkoutExerciseStat(BaseModel):
    id: str
    date: str
    sets: List[WorkoutSet]
    weight_unit: WeightUnit = WeightUnit.kg


class BestPerformance(BaseModel):
    workout_id: str
    date: str
    weight: str
    reps: str
    volume: float
    set_index: int
    all_sets: List[WorkoutSet]
    weight_unit: WeightUnit = WeightUnit.kg


class MaxWeightPerformance(BaseModel):
    workout_id: str
    date: str
    weight: str
    reps: str
    set_index: int
    all_sets: List[WorkoutSet]
    weight_unit: WeightUnit = WeightUnit.kg


class PersonalBest(BaseModel):
    weight: float
    reps: float
    date: str
    unit: WeightUnit = WeightUnit.kg


class SuggestedWeight(BaseModel):
    reps: int
    weight: float
    percent_of_one_rep_max: float


class ProgressPoint(BaseModel):
    date: str
    value: float


class ProgressSeries(BaseModel):
    best_set: List[ProgressPoint] = Field(default_factory=list)
    total_volume: List[ProgressPoint] = Field(default_factory=list)
    max_reps: List[ProgressPoint] = Field(default_factory=list)


class ExerciseSummary(BaseModel):
    exercise_name: str
    history_days: Optional[int] = None
    workouts: List[WorkoutExerciseStat] = Field(default_factory=list)
    best_performance: Optional[BestPerformance] = None
    max_weight: Optional[MaxWeightPerformance] = None
    estimated_one_rep_max: Optional[float] = None
    personal_bests: Dict[str, PersonalBest] = Field(default_factory=dict)
    target_reps: int
    target_weight: Optional[float] = None
    suggested_weights: List[SuggestedWeight] = Field(default_factory=list)
    progress: ProgressSeries = Field(default_factory=ProgressSeries)
