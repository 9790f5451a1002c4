# -*- coding: utf-8 -*-
"""Preferences — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_HISTORY_DAYS = 30
DEFAULT_SUGGESTED_REPS = 8
DEFAULT_HEALTH_SYNC = True


class WeightUnit(str, Enum):
    kg = "kg"
    lbs = "lbs"


DEFAULT_WEIGHT_UNIT = WeightUnit.kg


def normalize_weight_unit(value: object) -> WeightUnit:
    """Map any stored spelling onto a known unit, falling back to kg."""
    if isinstance(value, WeightUnit):
        return value
    s = str(value or "").strip().lower()
    if s in {"lb", "lbs", "pound", "pounds"}:
        return WeightUnit.lbs
    if s in {"kg", "kgs", "kilogram", "kilograms"}:
        return WeightUnit.kg
    return DEFAULT_WEIGHT_UNIT


class AppSettings(BaseModel):
    history_days: int = Field(DEFAULT_HISTORY_DAYS, ge=1, description="Days to look back for stats")
    suggested_reps: int = Field(DEFAULT_SUGGESTED_REPS, ge=1, le=36, description="Target reps for suggested weight")
    weight_unit: WeightUnit = DEFAULT_WEIGHT_UNIT
    health_sync: bool = DEFAULT_HEALTH_SYNC

    @field_validator("weight_unit", mode="before")
    @classmethod
    def _coerce_weight_unit(cls, value: object) -> WeightUnit:
        return normalize_weight_unit(value)


class AppSettingsUpdate(BaseModel):
    history_days: Optional[int] = Field(None, ge=1)
    suggested_reps: Optional[int] = Field(None, ge=1, le=36)
    weight_unit: Optional[WeightUnit] = None
    health_sync: Optional[bool] = None

    @field_validator("weight_unit", mode="before")
    @classmethod
    def _coerce_weight_unit(cls, value: object) -> Optional[WeightUnit]:
        if value is None:
            return None
        return normalize_weight_unit(value)


class WeightConversion(BaseModel):
    weight: float
    from_unit: WeightUnit
    to_unit: WeightUnit
    result: float
