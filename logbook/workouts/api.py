# -*- coding: utf-8 -*-
"""Workouts — API endpoints (workouts, templates, active workout, exercises)."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query

from ..healthsync.service import is_sync_enabled, sync_workout_to_health
from ..preferences.storage import get_history_days
from .models import (
    ActiveWorkout,
    ActiveWorkoutRequest,
    BestPerformance,
    ExerciseSetStat,
    ExerciseSummary,
    MaxWeightPerformance,
    TemplateCreateRequest,
    Workout,
    WorkoutCalendarResponse,
    WorkoutCreateRequest,
    WorkoutCreateResponse,
    WorkoutListResponse,
    WorkoutTemplate,
    WorkoutUpdateRequest,
)
from .stats import exercise_summary, get_best_performance, get_exercise_stats, get_max_weight
from .storage import (
    clear_active_workout,
    clear_all_data,
    delete_workout,
    delete_workout_template,
    get_active_workout,
    get_all_exercises,
    get_workout_by_id,
    get_workout_calendar,
    get_workout_templates,
    get_workouts,
    save_active_workout,
    save_workout,
    save_workout_as_template,
    search_exercises,
    update_workout,
)

router = APIRouter(prefix="/api/workouts", tags=["Workouts"])
templates_router = APIRouter(prefix="/api/templates", tags=["Templates"])
active_router = APIRouter(prefix="/api/active-workout", tags=["Active workout"])
exercises_router = APIRouter(prefix="/api/exercises", tags=["Exercises"])


def _resolve_history_days(history_days: Optional[int]) -> Optional[int]:
    # 0 disables the window; omitted falls back to the user's setting.
    if history_days is None:
        return get_history_days()
    return history_days or None


@router.post("", response_model=WorkoutCreateResponse, summary="Save a completed workout")
def create_workout(request: WorkoutCreateRequest, background_tasks: BackgroundTasks):
    workout = save_workout(
        request.exercises,
        start_time=request.start_time,
        duration=request.duration,
        weight_unit=request.weight_unit,
    )
    scheduled = is_sync_enabled()
    if scheduled:
        background_tasks.add_task(sync_workout_to_health, workout)
    return WorkoutCreateResponse(id=workout.id, health_sync_scheduled=scheduled)


@router.get("", response_model=WorkoutListResponse, summary="List workouts (newest first)")
def list_workouts(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
):
    workouts = get_workouts()
    return WorkoutListResponse(count=len(workouts), workouts=workouts[offset : offset + limit])


@router.delete("", summary="Delete every workout and the exercise-name history")
def remove_all_workouts():
    clear_all_data()
    return {"status": "ok"}


@router.get("/calendar", response_model=WorkoutCalendarResponse, summary="Workout counts per day for a month")
def workout_calendar(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
):
    return WorkoutCalendarResponse(year=year, month=month, days=get_workout_calendar(year, month))


@router.get("/{workout_id}", response_model=Workout, summary="Get a workout")
def read_workout(workout_id: str):
    workout = get_workout_by_id(workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.put("/{workout_id}", response_model=Workout, summary="Replace a workout")
def replace_workout(workout_id: str, request: WorkoutUpdateRequest):
    if request.workout.id != workout_id:
        raise HTTPException(status_code=400, detail="Workout id mismatch")
    if not update_workout(request.workout, request.new_weight_unit):
        raise HTTPException(status_code=404, detail="Workout not found")
    return get_workout_by_id(workout_id)


@router.delete("/{workout_id}", summary="Delete a workout")
def remove_workout(workout_id: str):
    if not delete_workout(workout_id):
        raise HTTPException(status_code=404, detail="Workout not found")
    return {"status": "ok"}


# ---- Templates ----


@templates_router.get("", response_model=List[WorkoutTemplate], summary="List workout templates")
def list_templates():
    return get_workout_templates()


@templates_router.post("", response_model=WorkoutTemplate, summary="Save a workout as a template")
def create_template(request: TemplateCreateRequest):
    workout = get_workout_by_id(request.workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    return save_workout_as_template(workout, request.name)


@templates_router.delete("/{template_id}", summary="Delete a template")
def remove_template(template_id: str):
    if not delete_workout_template(template_id):
        raise HTTPException(status_code=404, detail="Template not found")
    return {"status": "ok"}


# ---- Active workout ----


@active_router.get("", response_model=Optional[ActiveWorkout], summary="Get the in-progress workout")
def read_active_workout():
    return get_active_workout()


@active_router.put("", summary="Save the in-progress workout (empty clears it)")
def write_active_workout(request: ActiveWorkoutRequest):
    save_active_workout(request.exercises, request.weight_unit)
    return {"status": "ok"}


@active_router.delete("", summary="Discard the in-progress workout")
def remove_active_workout():
    clear_active_workout()
    return {"status": "ok"}


# ---- Exercises ----


@exercises_router.get("", response_model=List[str], summary="All known exercise names")
def list_exercises():
    return get_all_exercises()


@exercises_router.get("/search", response_model=List[str], summary="Autocomplete exercise names")
def search(q: str = Query(default="")):
    return search_exercises(q)


@exercises_router.get("/{exercise_name}/sets", response_model=List[ExerciseSetStat], summary="Every logged set, newest first")
def exercise_sets(exercise_name: str):
    return get_exercise_stats(exercise_name)


@exercises_router.get("/{exercise_name}/best", response_model=Optional[BestPerformance], summary="Highest-volume set")
def exercise_best(exercise_name: str, history_days: Optional[int] = Query(default=None, ge=0)):
    return get_best_performance(exercise_name, _resolve_history_days(history_days))


@exercises_router.get("/{exercise_name}/max-weight", response_model=Optional[MaxWeightPerformance], summary="Heaviest set")
def exercise_max_weight(exercise_name: str, history_days: Optional[int] = Query(default=None, ge=0)):
    return get_max_weight(exercise_name, _resolve_history_days(history_days))


@exercises_router.get("/{exercise_name}/summary", response_model=ExerciseSummary, summary="History, records and suggested weights")
def exercise_stats_summary(exercise_name: str, history_days: Optional[int] = Query(default=None, ge=0)):
    return exercise_summary(exercise_name, _resolve_history_days(history_days))
