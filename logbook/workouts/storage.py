# -*- coding: utf-8 -*-
"""Workouts — key-value storage (workouts, templates, active workout, exercise names)."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from .. import kvstore
from ..dates import local_date, utc_now_iso
from ..preferences.models import WeightUnit, normalize_weight_unit
from .models import ActiveWorkout, Exercise, Workout, WorkoutTemplate

logger = logging.getLogger(__name__)

WORKOUTS_KEY = "workouts"
EXERCISE_HISTORY_KEY = "exerciseHistory"
TEMPLATES_KEY = "workoutTemplates"
ACTIVE_WORKOUT_KEY = "activeWorkout"


def new_id() -> str:
    return str(uuid4())


# ---- Workouts ----


def get_workouts() -> List[Workout]:
    return kvstore.load_records(WORKOUTS_KEY, Workout)


def get_workout_by_id(workout_id: str) -> Optional[Workout]:
    for workout in get_workouts():
        if workout.id == workout_id:
            return workout
    return None


def save_workouts_list(workouts: List[Workout]) -> None:
    """Replace the stored workouts; records that no longer validate are kept."""
    kvstore.update_records(WORKOUTS_KEY, Workout, lambda _: list(workouts))


def save_workout(
    exercises: List[Exercise],
    *,
    start_time: Optional[str] = None,
    duration: Optional[float] = None,
    weight_unit: Optional[WeightUnit | str] = None,
) -> Workout:
    """Store a completed workout ahead of the existing ones."""
    now = utc_now_iso()
    workout = Workout(
        id=new_id(),
        date=now,
        exercises=exercises,
        start_time=start_time or now,
        duration=duration or 0,
        weight_unit=normalize_weight_unit(weight_unit) if weight_unit else WeightUnit.kg,
    )
    kvstore.update_records(WORKOUTS_KEY, Workout, lambda existing: [workout, *existing])
    update_exercise_history(exercises)
    logger.info("Saved workout %s with %d exercises", workout.id, len(exercises))
    return workout


def update_workout(workout: Workout, new_weight_unit: Optional[WeightUnit | str] = None) -> bool:
    updated = workout.model_copy()
    if new_weight_unit:
        updated.weight_unit = normalize_weight_unit(new_weight_unit)

    def replace(workouts: List[Workout]) -> Optional[List[Workout]]:
        if not any(w.id == workout.id for w in workouts):
            return None
        return [updated if w.id == workout.id else w for w in workouts]

    if kvstore.update_records(WORKOUTS_KEY, Workout, replace) is None:
        return False
    update_exercise_history(workout.exercises)
    return True


def delete_workout(workout_id: str) -> bool:
    def drop(workouts: List[Workout]) -> Optional[List[Workout]]:
        remaining = [w for w in workouts if w.id != workout_id]
        return remaining if len(remaining) != len(workouts) else None

    if kvstore.update_records(WORKOUTS_KEY, Workout, drop) is None:
        logger.warning("Workout %s not found for deletion", workout_id)
        return False
    return True


def get_workout_calendar(year: int, month: int) -> Dict[str, int]:
    """Workout counts per local day for the given month."""
    counts: Counter[str] = Counter()
    for workout in get_workouts():
        day = local_date(workout.start_time or workout.date)
        if day is None or day.year != year or day.month != month:
            continue
        counts[day.isoformat()] += 1
    return dict(sorted(counts.items()))


# ---- Templates ----


def get_workout_templates() -> List[WorkoutTemplate]:
    return kvstore.load_records(TEMPLATES_KEY, WorkoutTemplate)


def save_workout_as_template(workout: Workout, template_name: str) -> WorkoutTemplate:
    template = WorkoutTemplate(
        id=f"{workout.id}_template_{new_id()}",
        name=template_name,
        exercises=workout.exercises,
    )
    kvstore.update_records(TEMPLATES_KEY, WorkoutTemplate, lambda templates: [*templates, template])
    return template


def delete_workout_template(template_id: str) -> bool:
    def drop(templates: List[WorkoutTemplate]) -> Optional[List[WorkoutTemplate]]:
        remaining = [t for t in templates if t.id != template_id]
        return remaining if len(remaining) != len(templates) else None

    if kvstore.update_records(TEMPLATES_KEY, WorkoutTemplate, drop) is None:
        logger.warning("Template %s not found for deletion", template_id)
        return False
    return True


# ---- Active (in-progress) workout ----


def save_active_workout(exercises: List[Exercise], weight_unit: Optional[WeightUnit | str] = None) -> None:
    if not exercises:
        clear_active_workout()
        return
    active = ActiveWorkout(
        exercises=exercises,
        timestamp=utc_now_iso(),
        weight_unit=normalize_weight_unit(weight_unit) if weight_unit else WeightUnit.kg,
    )
    kvstore.set_json(ACTIVE_WORKOUT_KEY, active.model_dump(mode="json"))


def get_active_workout() -> Optional[ActiveWorkout]:
    raw = kvstore.get_json(ACTIVE_WORKOUT_KEY)
    if not raw:
        return None
    # Older records stored the bare exercise list.
    if isinstance(raw, list):
        raw = {"exercises": raw, "weight_unit": WeightUnit.kg.value}
    try:
        active = ActiveWorkout.model_validate(raw)
    except ValidationError:
        logger.warning("Discarding malformed active workout: %r", raw)
        return None
    return active if active.exercises else None


def clear_active_workout() -> None:
    kvstore.remove(ACTIVE_WORKOUT_KEY)


# ---- Exercise name history ----


def _history_list(raw: object) -> List[str]:
    return [str(name) for name in raw] if isinstance(raw, list) else []


def get_exercise_history() -> List[str]:
    return _history_list(kvstore.get_json(EXERCISE_HISTORY_KEY, []))


def update_exercise_history(exercises: Iterable[Exercise]) -> List[str]:
    names = [ex.name for ex in exercises]
    merged: List[str] = []

    def extend(raw: object) -> Optional[List[str]]:
        nonlocal merged
        history = _history_list(raw)
        # dict keeps first-seen order while dropping duplicates.
        merged = list(dict.fromkeys([*history, *names]))
        return merged if merged != history else None

    kvstore.update_json(EXERCISE_HISTORY_KEY, extend, [])
    return merged


def get_all_exercises() -> List[str]:
    return get_exercise_history()


def search_exercises(query: str) -> List[str]:
    """Case-insensitive substring search; prefix matches sort first."""
    q = (query or "").strip().lower()
    if not q:
        return []
    matches = [name for name in get_exercise_history() if q in name.lower()]
    return sorted(matches, key=lambda name: (not name.lower().startswith(q), name.lower()))


def clear_all_data() -> None:
    kvstore.remove_many([WORKOUTS_KEY, EXERCISE_HISTORY_KEY])
