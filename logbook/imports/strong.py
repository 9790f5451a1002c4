# -*- coding: utf-8 -*-
"""Strong app CSV import.

Pipeline: CSV text -> rows -> groups keyed by (date, workout name) ->
workouts with nested exercises/sets -> drop groups whose start instant
already exists -> append to storage and extend the exercise-name history.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from .. import kvstore
from ..dates import parse_instant, to_iso, utc_now
from ..preferences.models import WeightUnit, normalize_weight_unit
from ..workouts.models import Exercise, Workout, WorkoutSet
from ..workouts.storage import WORKOUTS_KEY, new_id, update_exercise_history
from .models import ImportResult, StrongRow

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("Date", "Workout Name", "Exercise Name")

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)
_HOURS = re.compile(r"(\d+)\s*h")
_MINUTES = re.compile(r"(\d+)\s*m(?!s)")
_SECONDS = re.compile(r"(\d+)\s*s")


class StrongImportError(ValueError):
    """The export could not be turned into workouts."""


def parse_duration(text: str) -> int:
    """Strong duration such as ``"1h 7m"`` to seconds."""
    text = text or ""
    hours = _HOURS.search(text)
    minutes = _MINUTES.search(text)
    seconds = _SECONDS.search(text)
    total = 0
    if hours:
        total += int(hours.group(1)) * 3600
    if minutes:
        total += int(minutes.group(1)) * 60
    if seconds:
        total += int(seconds.group(1))
    return total


def parse_date(text: str) -> str:
    """Export timestamp (local time) to a UTC ISO8601 string.

    Unparseable values fall back to the current time so the rest of the
    export still imports.
    """
    raw = (text or "").strip()
    dt = parse_instant(raw)
    if dt is None:
        for fmt in _DATE_FORMATS:
            try:
                dt = datetime.strptime(raw, fmt)
                break
            except ValueError:
                continue
    if dt is None:
        logger.warning("Could not parse date %r, using current time instead", raw)
        dt = utc_now()
    return to_iso(dt)


def parse_csv(csv_text: str) -> List[StrongRow]:
    text = (csv_text or "").lstrip("\ufeff")
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        header = next(reader)
    except StopIteration:
        return []
    headers = [h.replace('"', "").strip() for h in header]
    missing = [c for c in REQUIRED_COLUMNS if c not in headers]
    if missing:
        raise StrongImportError(f"Not a Strong export, missing columns: {', '.join(missing)}")

    rows: List[StrongRow] = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        record = {h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)}
        rows.append(StrongRow.model_validate(record))
    return rows


def group_by_workout(rows: List[StrongRow]) -> Dict[Tuple[str, str], List[StrongRow]]:
    groups: Dict[Tuple[str, str], List[StrongRow]] = {}
    for row in rows:
        groups.setdefault((row.date, row.workout_name), []).append(row)
    return groups


def convert_to_workout(rows: List[StrongRow], weight_unit: WeightUnit | str = WeightUnit.lbs) -> Workout:
    if not rows:
        raise StrongImportError("No workout data to convert")

    exercises: Dict[str, Exercise] = {}
    for row in rows:
        exercise = exercises.get(row.exercise_name)
        if exercise is None:
            exercise = Exercise(id=new_id(), name=row.exercise_name or "Unknown exercise")
            exercises[row.exercise_name] = exercise
        exercise.sets.append(WorkoutSet(id=new_id(), weight=row.weight or "0", reps=row.reps or "0"))

    first = rows[0]
    started = parse_date(first.date)
    return Workout(
        id=new_id(),
        date=started,
        exercises=list(exercises.values()),
        start_time=started,
        duration=parse_duration(first.duration),
        weight_unit=normalize_weight_unit(weight_unit),
    )


def import_from_strong_csv(csv_text: str, weight_unit: WeightUnit | str = WeightUnit.lbs) -> ImportResult:
    """Import a Strong export, skipping workouts whose start time is already stored."""
    try:
        groups = group_by_workout(parse_csv(csv_text))
        candidates = [convert_to_workout(rows, weight_unit) for rows in groups.values()]
        result = ImportResult(total_workouts=len(groups))
        imported: List[Workout] = []

        def append_new(existing: List[Workout]) -> Optional[List[Workout]]:
            seen: Set[datetime] = {
                instant for instant in (parse_instant(w.date) for w in existing) if instant is not None
            }
            imported.clear()
            for workout in candidates:
                instant = parse_instant(workout.date)
                if instant in seen:
                    continue
                seen.add(instant)
                imported.append(workout)
            return [*existing, *imported] if imported else None

        kvstore.update_records(WORKOUTS_KEY, Workout, append_new)
        if imported:
            update_exercise_history(ex for w in imported for ex in w.exercises)
        result.imported = len(imported)
        result.skipped_duplicates = len(candidates) - len(imported)
        result.workout_ids = [w.id for w in imported]
    except Exception:
        logger.exception("Error importing Strong CSV")
        raise

    logger.info(
        "Strong import: %d imported, %d duplicates skipped of %d workouts",
        result.imported,
        result.skipped_duplicates,
        result.total_workouts,
    )
    return result
