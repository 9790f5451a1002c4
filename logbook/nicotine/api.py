# -*- coding: utf-8 -*-
"""Nicotine — API endpoints."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from .models import (
    NicotineDailyStats,
    NicotineEntriesResponse,
    NicotineEntry,
    NicotineEntryRequest,
    NicotineSettings,
    NicotineSettingsUpdate,
    NicotineStats,
    NicotineUsageDay,
)
from .storage import (
    add_entry,
    delete_entry,
    get_available_dates,
    get_daily_stats,
    get_daily_usage_data,
    get_entries,
    get_nicotine_settings,
    get_stats,
    update_nicotine_settings,
)

router = APIRouter(prefix="/api/nicotine", tags=["Nicotine"])


@router.get("/entries", response_model=NicotineEntriesResponse, summary="Entries, newest first")
def list_entries(day: Optional[date] = Query(default=None)):
    entries = get_entries(day)
    return NicotineEntriesResponse(count=len(entries), entries=entries)


@router.post("/entries", response_model=NicotineEntry, summary="Log a use")
def create_entry(request: NicotineEntryRequest):
    try:
        return add_entry(request.amount, request.timestamp)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/entries/{entry_id}", summary="Delete an entry")
def remove_entry(entry_id: str):
    if not delete_entry(entry_id):
        raise HTTPException(status_code=404, detail="Entry not found")
    return {"status": "ok"}


@router.get("/settings", response_model=NicotineSettings, summary="Tracking mode and daily goal")
def read_settings():
    return get_nicotine_settings()


@router.patch("/settings", response_model=NicotineSettings, summary="Update tracking settings")
def patch_settings(update: NicotineSettingsUpdate):
    return update_nicotine_settings(update)


@router.get("/stats", response_model=NicotineStats, summary="Day total and rolling averages")
def stats(day: Optional[date] = Query(default=None)):
    return get_stats(day)


@router.get("/stats/daily", response_model=NicotineDailyStats, summary="Day total, count and remaining")
def daily_stats(day: Optional[date] = Query(default=None)):
    return get_daily_stats(day)


@router.get("/dates", response_model=List[str], summary="Days with entries, newest first")
def available_dates():
    return get_available_dates()


@router.get("/usage", response_model=List[NicotineUsageDay], summary="Daily usage, oldest first")
def usage(days: int = Query(default=7, description="7 or 30")):
    try:
        return get_daily_usage_data(days)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
