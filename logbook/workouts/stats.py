# -*- coding: utf-8 -*-
"""Exercise statistics over stored workouts.

Weights and reps are stored as the strings the user typed; every numeric
read goes through ``to_number`` which mirrors a lenient float parse
(leading number wins, anything unparseable is 0).
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from ..dates import parse_instant, utc_now
from ..preferences.models import WeightUnit
from ..preferences.storage import convert_weight, get_suggested_reps
from .models import (
    BestPerformance,
    ExerciseSetStat,
    ExerciseSummary,
    MaxWeightPerformance,
    PersonalBest,
    ProgressPoint,
    ProgressSeries,
    SuggestedWeight,
    WorkoutExerciseStat,
)
from .storage import get_workouts

SUGGESTED_REP_RANGES = (1, 2, 3, 5, 8, 10, 12, 15)

_LEADING_NUMBER = re.compile(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?")


def to_number(value: object) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value or ""))
    return float(match.group(0)) if match else 0.0


def _sort_key(date_str: str) -> datetime:
    return parse_instant(date_str) or datetime.min.replace(tzinfo=timezone.utc)


def _same_exercise(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def estimate_one_rep_max(weight: float, reps: float) -> float:
    """Brzycki estimate; reps are capped at 36 to keep the denominator positive."""
    if weight <= 0 or reps <= 0:
        return 0.0
    return weight * (36 / (37 - min(reps, 36)))


def suggested_weight(one_rep_max: float, target_reps: float) -> float:
    if one_rep_max <= 0 or target_reps <= 0:
        return 0.0
    return one_rep_max * (1.0278 - 0.0278 * target_reps)


def get_exercise_stats(exercise_name: str) -> List[ExerciseSetStat]:
    """Every set ever logged for the exercise, newest first."""
    stats: List[ExerciseSetStat] = []
    for workout in get_workouts():
        for exercise in workout.exercises:
            if not _same_exercise(exercise.name, exercise_name):
                continue
            for s in exercise.sets:
                stats.append(ExerciseSetStat(date=workout.date, reps=s.reps, weight=s.weight))
    stats.sort(key=lambda s: _sort_key(s.date), reverse=True)
    return stats


def get_exercise_stats_by_workout(exercise_name: str, history_days: Optional[int] = None) -> List[WorkoutExerciseStat]:
    cutoff = utc_now() - timedelta(days=history_days) if history_days else None
    out: List[WorkoutExerciseStat] = []
    for workout in get_workouts():
        if cutoff is not None:
            when = parse_instant(workout.date)
            if when is not None and when < cutoff:
                continue
        # Only the first matching exercise of a workout counts.
        exercise = next((ex for ex in workout.exercises if _same_exercise(ex.name, exercise_name)), None)
        if exercise is None:
            continue
        out.append(
            WorkoutExerciseStat(
                id=workout.id,
                date=workout.date,
                sets=[s.model_copy() for s in exercise.sets],
                weight_unit=workout.weight_unit,
            )
        )
    out.sort(key=lambda w: _sort_key(w.date), reverse=True)
    return out


def get_best_performance(exercise_name: str, history_days: Optional[int] = None) -> Optional[BestPerformance]:
    """The single set with the highest weight x reps."""
    best: Optional[BestPerformance] = None
    highest = 0.0
    for workout in get_exercise_stats_by_workout(exercise_name, history_days):
        for index, s in enumerate(workout.sets):
            weight = to_number(s.weight)
            reps = to_number(s.reps)
            volume = weight * reps
            if weight > 0 and reps > 0 and volume > highest:
                highest = volume
                best = BestPerformance(
                    workout_id=workout.id,
                    date=workout.date,
                    weight=s.weight,
                    reps=s.reps,
                    volume=volume,
                    set_index=index,
                    all_sets=workout.sets,
                    weight_unit=workout.weight_unit,
                )
    return best


def get_max_weight(exercise_name: str, history_days: Optional[int] = None) -> Optional[MaxWeightPerformance]:
    """The heaviest completed set, compared in kg across workouts of either unit."""
    best: Optional[MaxWeightPerformance] = None
    heaviest = 0.0
    for workout in get_exercise_stats_by_workout(exercise_name, history_days):
        for index, s in enumerate(workout.sets):
            weight = to_number(s.weight)
            reps = to_number(s.reps)
            normalized = convert_weight(weight, workout.weight_unit, WeightUnit.kg)
            if weight > 0 and reps > 0 and normalized > heaviest:
                heaviest = normalized
                best = MaxWeightPerformance(
                    workout_id=workout.id,
                    date=workout.date,
                    weight=s.weight,
                    reps=s.reps,
                    set_index=index,
                    all_sets=workout.sets,
                    weight_unit=workout.weight_unit,
                )
    return best


def personal_bests(workouts: List[WorkoutExerciseStat]) -> Dict[str, PersonalBest]:
    """Heaviest weight per rep count, keyed by the reps string."""
    bests: Dict[str, PersonalBest] = {}
    for workout in workouts:
        for s in workout.sets:
            weight = to_number(s.weight)
            current = bests.get(s.reps)
            if current is None or weight > current.weight:
                bests[s.reps] = PersonalBest(
                    weight=weight,
                    reps=to_number(s.reps),
                    date=workout.date,
                    unit=workout.weight_unit,
                )
    return bests


def progress_series(workouts: List[WorkoutExerciseStat]) -> ProgressSeries:
    series = ProgressSeries()
    for workout in sorted(workouts, key=lambda w: _sort_key(w.date)):
        weights = [to_number(s.weight) for s in workout.sets]
        reps = [to_number(s.reps) for s in workout.sets]
        series.best_set.append(ProgressPoint(date=workout.date, value=max(weights, default=0.0)))
        series.total_volume.append(
            ProgressPoint(date=workout.date, value=sum(w * r for w, r in zip(weights, reps)))
        )
        series.max_reps.append(ProgressPoint(date=workout.date, value=max(reps, default=0.0)))
    return series


def exercise_summary(exercise_name: str, history_days: Optional[int] = None) -> ExerciseSummary:
    workouts = get_exercise_stats_by_workout(exercise_name, history_days)
    best = get_best_performance(exercise_name, history_days)
    target_reps = get_suggested_reps()
    summary = ExerciseSummary(
        exercise_name=exercise_name,
        history_days=history_days,
        workouts=workouts,
        best_performance=best,
        max_weight=get_max_weight(exercise_name, history_days),
        target_reps=target_reps,
        progress=progress_series(workouts),
    )
    if best is None:
        return summary

    one_rm = estimate_one_rep_max(to_number(best.weight), to_number(best.reps))
    summary.estimated_one_rep_max = round(one_rm, 1)
    summary.personal_bests = personal_bests(workouts)
    if one_rm > 0:
        summary.target_weight = round(suggested_weight(one_rm, target_reps), 1)
        for reps in SUGGESTED_REP_RANGES:
            weight = suggested_weight(one_rm, reps)
            summary.suggested_weights.append(
                SuggestedWeight(
                    reps=reps,
                    weight=round(weight, 1),
                    percent_of_one_rep_max=round(weight / one_rm * 100),
                )
            )
    return summary
