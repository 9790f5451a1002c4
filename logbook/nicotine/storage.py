# -*- coding: utf-8 -*-
"""Nicotine — key-value storage and daily statistics.

Days are local calendar days; timestamps are stored as UTC ISO8601.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import ValidationError

from .. import kvstore
from ..dates import format_date_to_yyyymmdd, local_date, parse_instant, to_iso, utc_now, utc_now_iso
from .models import (
    NicotineDailyStats,
    NicotineEntry,
    NicotineSettings,
    NicotineSettingsUpdate,
    NicotineStats,
    NicotineUsageDay,
    TrackingMode,
)

logger = logging.getLogger(__name__)

ENTRIES_KEY = "nicotine_entries"
SETTINGS_KEY = "nicotine_settings"

USAGE_WINDOWS = (7, 30)


def _instant(entry: NicotineEntry) -> datetime:
    return parse_instant(entry.timestamp) or datetime.min.replace(tzinfo=timezone.utc)


def _load_entries() -> List[NicotineEntry]:
    return kvstore.load_records(ENTRIES_KEY, NicotineEntry)


def get_entries(day: Optional[date] = None) -> List[NicotineEntry]:
    """All entries newest first, or only those on the given local day."""
    entries = sorted(_load_entries(), key=_instant, reverse=True)
    if day is None:
        return entries
    return [e for e in entries if local_date(e.timestamp) == day]


def add_entry(amount: Optional[float] = None, timestamp: Optional[str] = None) -> NicotineEntry:
    if amount is None:
        amount = get_nicotine_settings().default_amount
    if amount < 0:
        raise ValueError("amount must not be negative")
    if timestamp is None:
        when = utc_now_iso()
    else:
        parsed = parse_instant(timestamp)
        if parsed is None:
            raise ValueError(f"Invalid timestamp: {timestamp!r}")
        when = to_iso(parsed)

    entry = NicotineEntry(id=str(uuid4()), amount=amount, timestamp=when)
    kvstore.update_records(ENTRIES_KEY, NicotineEntry, lambda entries: [*entries, entry])
    return entry


def delete_entry(entry_id: str) -> bool:
    def drop(entries: List[NicotineEntry]) -> Optional[List[NicotineEntry]]:
        remaining = [e for e in entries if e.id != entry_id]
        return remaining if len(remaining) != len(entries) else None

    return kvstore.update_records(ENTRIES_KEY, NicotineEntry, drop) is not None


# ---- Settings ----


def get_nicotine_settings() -> NicotineSettings:
    """Stored settings; the defaults are written on first read."""
    raw = kvstore.get_json(SETTINGS_KEY)
    if raw is None:
        defaults = NicotineSettings().model_dump(mode="json")
        raw = kvstore.update_json(SETTINGS_KEY, lambda current: defaults if current is None else None)
        if raw is None:
            raw = kvstore.get_json(SETTINGS_KEY)
    try:
        return NicotineSettings.model_validate(raw)
    except ValidationError:
        logger.warning("Stored nicotine settings are malformed, using defaults")
        return NicotineSettings()


def update_nicotine_settings(update: NicotineSettingsUpdate) -> NicotineSettings:
    changes = update.model_dump(exclude_none=True)

    def merge(raw: object) -> dict:
        try:
            current = NicotineSettings.model_validate(raw) if raw is not None else NicotineSettings()
        except ValidationError:
            logger.warning("Replacing malformed nicotine settings")
            current = NicotineSettings()
        merged = NicotineSettings.model_validate({**current.model_dump(), **changes})
        return merged.model_dump(mode="json")

    return NicotineSettings.model_validate(kvstore.update_json(SETTINGS_KEY, merge))


# ---- Stats ----


def get_stats(day: Optional[date] = None) -> NicotineStats:
    """Total for ``day`` (today by default) plus trailing 7/30-day daily averages."""
    day = day or date.today()
    entries = _load_entries()
    now = utc_now()
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)
    return NicotineStats(
        today_total=sum(e.amount for e in entries if local_date(e.timestamp) == day),
        weekly_average=sum(e.amount for e in entries if _instant(e) >= week_ago) / 7,
        monthly_average=sum(e.amount for e in entries if _instant(e) >= month_ago) / 30,
    )


def get_daily_stats(day: Optional[date] = None) -> NicotineDailyStats:
    day = day or date.today()
    entries = get_entries(day)
    settings = get_nicotine_settings()
    total = sum(e.amount for e in entries)
    count = len(entries)
    used = total if settings.tracking_mode == TrackingMode.mg else count
    return NicotineDailyStats(
        date=format_date_to_yyyymmdd(day),
        total=total,
        count=count,
        remaining=max(0, settings.daily_goal - used),
    )


def get_available_dates() -> List[str]:
    """Local days that have entries, newest first."""
    days = {d for d in (local_date(e.timestamp) for e in _load_entries()) if d is not None}
    return [format_date_to_yyyymmdd(d) for d in sorted(days, reverse=True)]


def get_daily_usage_data(days: int = 7, today: Optional[date] = None) -> List[NicotineUsageDay]:
    """Per-day totals for the last ``days`` days, oldest first."""
    if days not in USAGE_WINDOWS:
        raise ValueError(f"days must be one of {USAGE_WINDOWS}")
    today = today or date.today()
    buckets = {
        today - timedelta(days=offset): NicotineUsageDay(date=format_date_to_yyyymmdd(today - timedelta(days=offset)))
        for offset in range(days - 1, -1, -1)
    }
    for entry in _load_entries():
        bucket = buckets.get(local_date(entry.timestamp))
        if bucket is not None:
            bucket.total += entry.amount
            bucket.count += 1
    return list(buckets.values())
