# -*- coding: utf-8 -*-
"""Imports — Pydantic models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..preferences.models import WeightUnit, normalize_weight_unit


class StrongRow(BaseModel):
    """One set row of a Strong CSV export."""

    model_config = ConfigDict(populate_by_name=True)

    date: str = Field("", alias="Date")
    workout_name: str = Field("", alias="Workout Name")
    duration: str = Field("", alias="Duration")
    exercise_name: str = Field("", alias="Exercise Name")
    set_order: str = Field("", alias="Set Order")
    weight: str = Field("", alias="Weight")
    reps: str = Field("", alias="Reps")
    distance: str = Field("", alias="Distance")
    seconds: str = Field("", alias="Seconds")
    notes: str = Field("", alias="Notes")
    workout_notes: str = Field("", alias="Workout Notes")
    rpe: str = Field("", alias="RPE")


class ImportTextRequest(BaseModel):
    csv_text: str = Field(..., min_length=1)
    weight_unit: WeightUnit = WeightUnit.lbs

    @field_validator("weight_unit", mode="before")
    @classmethod
    def _coerce_weight_unit(cls, value: object) -> WeightUnit:
        return normalize_weight_unit(value or WeightUnit.lbs)


class ImportResult(BaseModel):
    imported: int = 0
    skipped_duplicates: int = 0
    total_workouts: int = 0
    workout_ids: List[str] = Field(default_factory=list)
