# -*- coding: utf-8 -*-
"""Nutrition — key-value storage (diary, favorites, recent searches)."""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from .. import kvstore
from ..dates import format_date_to_yyyymmdd
from .models import (
    DailyDiary,
    DiaryEntry,
    MealType,
    NutritionItem,
    NutritionTotals,
    NutritionTrends,
    TrendDay,
)

logger = logging.getLogger(__name__)

FAVORITES_STORAGE_KEY = "nutrition_favorites"
DIARY_STORAGE_KEY = "nutrition_diary"
RECENT_SEARCHES_KEY = "nutrition_recent_searches"

MAX_RECENT_SEARCHES = 10


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _scaled(food: NutritionItem, quantity: float) -> Dict[str, int]:
    if food.serving_size_g <= 0:
        raise ValueError("serving_size_g must be positive")
    factor = quantity / food.serving_size_g
    return {
        "calories": round_half_up(food.calories * factor),
        "protein": round_half_up(food.protein_g * factor),
        "carbs": round_half_up(food.carbohydrates_total_g * factor),
        "fat": round_half_up(food.fat_total_g * factor),
    }


def compute_totals(entries: List[DiaryEntry]) -> NutritionTotals:
    return NutritionTotals(
        calories=sum(e.calories for e in entries),
        protein=sum(e.protein for e in entries),
        carbs=sum(e.carbs for e in entries),
        fat=sum(e.fat for e in entries),
    )


# ---- Diary ----


def _load_diary() -> Dict[str, DailyDiary]:
    raw = kvstore.get_json(DIARY_STORAGE_KEY, {}) or {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring malformed nutrition diary record")
        return {}
    diary: Dict[str, DailyDiary] = {}
    for day, value in raw.items():
        try:
            diary[day] = DailyDiary.model_validate(value)
        except ValidationError:
            logger.warning("Skipping malformed diary day %s", day)
    return diary


def _update_day(day: str, fn: Callable[[Optional[DailyDiary]], Optional[DailyDiary]]) -> Optional[DailyDiary]:
    """Apply ``fn`` to one diary day and store the result; other days are kept as stored.

    ``fn`` returns the new day, or ``None`` to leave the diary untouched.
    """
    result: Optional[DailyDiary] = None

    def apply(raw: object) -> Optional[Dict[str, object]]:
        nonlocal result
        raw = {} if raw is None else raw
        if not isinstance(raw, dict):
            raise ValueError("Stored nutrition diary is malformed")
        daily = None
        if day in raw:
            try:
                daily = DailyDiary.model_validate(raw[day])
            except ValidationError as exc:
                raise ValueError(f"Stored diary for {day} is malformed") from exc
        result = fn(daily)
        if result is None:
            return None
        result.totals = compute_totals(result.entries)
        return {**raw, day: result.model_dump(mode="json")}

    kvstore.update_json(DIARY_STORAGE_KEY, apply, {})
    return result


def add_to_diary(day: str, meal: MealType | str, food: NutritionItem, quantity: float) -> DiaryEntry:
    entry = DiaryEntry(
        id=str(uuid4()),
        date=day,
        meal=MealType(meal),
        food=food,
        quantity=quantity,
        **_scaled(food, quantity),
    )

    def append(daily: Optional[DailyDiary]) -> DailyDiary:
        daily = daily or DailyDiary(date=day)
        daily.entries.append(entry)
        return daily

    _update_day(day, append)
    return entry


def remove_from_diary(day: str, entry_id: str) -> bool:
    def drop(daily: Optional[DailyDiary]) -> Optional[DailyDiary]:
        if daily is None or not any(e.id == entry_id for e in daily.entries):
            return None
        daily.entries = [e for e in daily.entries if e.id != entry_id]
        return daily

    return _update_day(day, drop) is not None


def update_diary_entry(
    day: str,
    entry_id: str,
    *,
    quantity: Optional[float] = None,
    meal: Optional[MealType | str] = None,
) -> Optional[DiaryEntry]:
    if quantity is not None and quantity <= 0:
        raise ValueError("quantity must be positive")
    updated: Optional[DiaryEntry] = None

    def edit(daily: Optional[DailyDiary]) -> Optional[DailyDiary]:
        nonlocal updated
        entry = next((e for e in daily.entries if e.id == entry_id), None) if daily else None
        if entry is None:
            return None
        if quantity is not None:
            entry.quantity = quantity
            for field, value in _scaled(entry.food, quantity).items():
                setattr(entry, field, value)
        if meal is not None:
            entry.meal = MealType(meal)
        updated = entry
        return daily

    _update_day(day, edit)
    return updated


def get_diary_for_date(day: str) -> Optional[DailyDiary]:
    return _load_diary().get(day)


def get_diary_entries_for_date_range(start: str, end: str) -> List[DiaryEntry]:
    """Entries of every diary day in ``[start, end]`` (YYYY-MM-DD strings)."""
    entries: List[DiaryEntry] = []
    for day in sorted(_load_diary().items()):
        if start <= day[0] <= end:
            entries.extend(day[1].entries)
    return entries


def calculate_daily_nutrition(diary: Optional[DailyDiary]) -> NutritionTotals:
    if diary is None:
        return NutritionTotals()
    return diary.totals


def get_nutrition_trends(days: int = 7, end: Optional[date] = None) -> NutritionTrends:
    """Per-day totals for the ``days`` days ending at ``end`` (inclusive), zero-filled."""
    if days < 1:
        raise ValueError("days must be >= 1")
    end = end or date.today()
    start = end - timedelta(days=days - 1)
    start_s = format_date_to_yyyymmdd(start)
    end_s = format_date_to_yyyymmdd(end)

    per_day: Dict[str, TrendDay] = {}
    for offset in range(days):
        key = format_date_to_yyyymmdd(start + timedelta(days=offset))
        per_day[key] = TrendDay(date=key)
    for entry in get_diary_entries_for_date_range(start_s, end_s):
        bucket = per_day.get(entry.date)
        if bucket is None:
            continue
        bucket.calories += entry.calories
        bucket.protein += entry.protein
        bucket.carbs += entry.carbs
        bucket.fat += entry.fat

    trend_days = list(per_day.values())
    count = len(trend_days)
    averages = NutritionTotals(
        calories=round_half_up(sum(d.calories for d in trend_days) / count),
        protein=round_half_up(sum(d.protein for d in trend_days) / count),
        carbs=round_half_up(sum(d.carbs for d in trend_days) / count),
        fat=round_half_up(sum(d.fat for d in trend_days) / count),
    )
    return NutritionTrends(start=start_s, end=end_s, days=trend_days, averages=averages)


# ---- Recent searches ----


def _search_list(raw: object) -> List[str]:
    return [str(q) for q in raw] if isinstance(raw, list) else []


def get_recent_searches() -> List[str]:
    return _search_list(kvstore.get_json(RECENT_SEARCHES_KEY, []))


def save_recent_search(query: str) -> None:
    """Remember a query; known queries keep their position."""

    def remember(raw: object) -> Optional[List[str]]:
        searches = _search_list(raw)
        if query in searches:
            return None
        return [query, *searches][:MAX_RECENT_SEARCHES]

    try:
        kvstore.update_json(RECENT_SEARCHES_KEY, remember, [])
    except Exception:
        # Lookups never fail on a history write.
        logger.exception("Error saving recent search %r", query)


# ---- Favorites ----


def get_favorite_foods() -> List[NutritionItem]:
    return kvstore.load_records(FAVORITES_STORAGE_KEY, NutritionItem)


def save_favorite_food(food: NutritionItem) -> bool:
    """Add a favorite; returns False when one with the same name exists."""

    def append(favorites: List[NutritionItem]) -> Optional[List[NutritionItem]]:
        if any(f.name == food.name for f in favorites):
            return None
        return [*favorites, food]

    return kvstore.update_records(FAVORITES_STORAGE_KEY, NutritionItem, append) is not None


def remove_favorite_food(food_name: str) -> bool:
    def drop(favorites: List[NutritionItem]) -> Optional[List[NutritionItem]]:
        remaining = [f for f in favorites if f.name != food_name]
        return remaining if len(remaining) != len(favorites) else None

    return kvstore.update_records(FAVORITES_STORAGE_KEY, NutritionItem, drop) is not None


def is_favorite_food(food_name: str) -> bool:
    return any(f.name == food_name for f in get_favorite_foods())
