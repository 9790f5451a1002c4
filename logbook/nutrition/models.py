# -*- coding: utf-8 -*-
"""Nutrition — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class NutritionItem(BaseModel):
    name: str = Field(..., min_length=1)
    calories: float = Field(0.0, ge=0)
    serving_size_g: float = Field(100.0, gt=0)
    fat_total_g: float = Field(0.0, ge=0)
    fat_saturated_g: float = Field(0.0, ge=0)
    protein_g: float = Field(0.0, ge=0)
    sodium_mg: float = Field(0.0, ge=0)
    potassium_mg: float = Field(0.0, ge=0)
    cholesterol_mg: float = Field(0.0, ge=0)
    carbohydrates_total_g: float = Field(0.0, ge=0)
    fiber_g: float = Field(0.0, ge=0)
    sugar_g: float = Field(0.0, ge=0)


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class NutritionTotals(BaseModel):
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0


class DiaryEntry(BaseModel):
    id: str
    date: str = Field(..., description="YYYY-MM-DD")
    meal: MealType
    food: NutritionItem
    quantity: float = Field(..., gt=0, description="grams")
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0


class DailyDiary(BaseModel):
    date: str
    entries: List[DiaryEntry] = Field(default_factory=list)
    totals: NutritionTotals = Field(default_factory=NutritionTotals)


class DiaryAddRequest(BaseModel):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    meal: MealType
    food: NutritionItem
    quantity: float = Field(..., gt=0)


class DiaryUpdateRequest(BaseModel):
    quantity: Optional[float] = Field(None, gt=0)
    meal: Optional[MealType] = None


class DiaryEntriesResponse(BaseModel):
    start: str
    end: str
    count: int
    entries: List[DiaryEntry]


class NutritionSearchResponse(BaseModel):
    query: str
    source: str = Field(..., description="provider name or 'local'")
    items: List[NutritionItem] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class TrendDay(BaseModel):
    date: str
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0


class NutritionTrends(BaseModel):
    start: str
    end: str
    days: List[TrendDay] = Field(default_factory=list)
    averages: NutritionTotals = Field(default_factory=NutritionTotals)
