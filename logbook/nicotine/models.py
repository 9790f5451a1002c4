# -*- coding: utf-8 -*-
"""Nicotine — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class TrackingMode(str, Enum):
    mg = "mg"
    frequency = "frequency"


class NicotineEntry(BaseModel):
    id: str
    amount: float = Field(..., ge=0, description="mg per use")
    timestamp: str = Field(..., description="UTC ISO8601")


class NicotineSettings(BaseModel):
    tracking_mode: TrackingMode = TrackingMode.mg
    daily_goal: float = Field(24, ge=0, description="mg or number of uses, depending on tracking_mode")
    default_amount: float = Field(3, ge=0, description="mg per use")


class NicotineSettingsUpdate(BaseModel):
    tracking_mode: Optional[TrackingMode] = None
    daily_goal: Optional[float] = Field(None, ge=0)
    default_amount: Optional[float] = Field(None, ge=0)


class NicotineEntryRequest(BaseModel):
    amount: Optional[float] = Field(None, ge=0, description="defaults to the configured amount")
    timestamp: Optional[str] = None


class NicotineStats(BaseModel):
    today_total: float = 0
    weekly_average: float = 0
    monthly_average: float = 0


class NicotineDailyStats(BaseModel):
    date: str
    total: float = 0
    count: int = 0
    remaining: float = 0


class NicotineUsageDay(BaseModel):
    date: str
    total: float = 0
    count: int = 0


class NicotineEntriesResponse(BaseModel):
    count: int
    entries: List[NicotineEntry]
