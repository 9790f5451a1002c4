# -*- coding: utf-8 -*-
"""Nutrition — API endpoints (lookup, diary, favorites, trends)."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from .client import NutritionLookupError, get_provider, search_nutrition
from .models import (
    DailyDiary,
    DiaryAddRequest,
    DiaryEntriesResponse,
    DiaryEntry,
    DiaryUpdateRequest,
    NutritionItem,
    NutritionSearchResponse,
    NutritionTrends,
)
from .storage import (
    add_to_diary,
    get_diary_entries_for_date_range,
    get_diary_for_date,
    get_favorite_foods,
    get_nutrition_trends,
    get_recent_searches,
    is_favorite_food,
    remove_favorite_food,
    remove_from_diary,
    save_favorite_food,
    update_diary_entry,
)

router = APIRouter(prefix="/api/nutrition", tags=["Nutrition"])

_DAY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


@router.get("/search", response_model=NutritionSearchResponse, summary="Look up foods by name")
def search(q: str = Query(..., min_length=1), provider: Optional[str] = Query(default=None)):
    try:
        return search_nutrition(q, provider=get_provider(provider) if provider else None)
    except NutritionLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/recent-searches", response_model=List[str], summary="Last queries, newest first")
def recent_searches():
    return get_recent_searches()


# ---- Favorites ----


@router.get("/favorites", response_model=List[NutritionItem], summary="Favorite foods")
def list_favorites():
    return get_favorite_foods()


@router.post("/favorites", summary="Add a favorite food")
def add_favorite(food: NutritionItem):
    if not save_favorite_food(food):
        raise HTTPException(status_code=409, detail="Food is already a favorite")
    return {"status": "ok"}


@router.get("/favorites/{food_name}", summary="Whether a food is a favorite")
def favorite_status(food_name: str):
    return {"name": food_name, "favorite": is_favorite_food(food_name)}


@router.delete("/favorites/{food_name}", summary="Remove a favorite food")
def delete_favorite(food_name: str):
    if not remove_favorite_food(food_name):
        raise HTTPException(status_code=404, detail="Favorite not found")
    return {"status": "ok"}


# ---- Diary ----


@router.post("/diary", response_model=DiaryEntry, summary="Log a food to the diary")
def create_diary_entry(request: DiaryAddRequest):
    try:
        return add_to_diary(request.date, request.meal, request.food, request.quantity)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/diary", response_model=DiaryEntriesResponse, summary="Diary entries in a date range")
def diary_range(
    start: str = Query(..., pattern=_DAY_PATTERN),
    end: str = Query(..., pattern=_DAY_PATTERN),
):
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    entries = get_diary_entries_for_date_range(start, end)
    return DiaryEntriesResponse(start=start, end=end, count=len(entries), entries=entries)


@router.get("/diary/{day}", response_model=DailyDiary, summary="One day of the diary")
def diary_day(day: str):
    # Days without entries read as an empty diary.
    return get_diary_for_date(day) or DailyDiary(date=day)


@router.patch("/diary/{day}/{entry_id}", response_model=DiaryEntry, summary="Change quantity or meal")
def patch_diary_entry(day: str, entry_id: str, request: DiaryUpdateRequest):
    try:
        entry = update_diary_entry(day, entry_id, quantity=request.quantity, meal=request.meal)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if entry is None:
        raise HTTPException(status_code=404, detail="Diary entry not found")
    return entry


@router.delete("/diary/{day}/{entry_id}", summary="Remove a diary entry")
def delete_diary_entry(day: str, entry_id: str):
    if not remove_from_diary(day, entry_id):
        raise HTTPException(status_code=404, detail="Diary entry not found")
    return {"status": "ok"}


@router.get("/trends", response_model=NutritionTrends, summary="Daily totals and averages")
def trends(
    days: int = Query(default=7, ge=1, le=365),
    end: Optional[date] = Query(default=None),
):
    return get_nutrition_trends(days, end)
