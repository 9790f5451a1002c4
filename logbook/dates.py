# -*- coding: utf-8 -*-
"""Shared date/time helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """UTC ISO8601 with a trailing Z; naive datetimes are taken as local time."""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return to_iso(utc_now())


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO8601 string into an aware datetime, or None."""
    if not value:
        return None
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def local_date(value: Optional[str]) -> Optional[date]:
    dt = parse_instant(value)
    if dt is None:
        return None
    return dt.astimezone().date()


def format_date_to_yyyymmdd(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"
