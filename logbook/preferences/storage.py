# -*- coding: utf-8 -*-
"""Preferences — key-value storage."""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import ValidationError

from .. import kvstore
from ..config import settings
from .models import AppSettings, AppSettingsUpdate, WeightUnit, normalize_weight_unit

logger = logging.getLogger(__name__)

SETTINGS_KEY = "appSettings"

KG_PER_LB_FACTOR = 2.20462


def _merged_over_defaults(saved: Dict[str, Any]) -> AppSettings:
    merged: Dict[str, Any] = AppSettings().model_dump()
    merged.update({k: v for k, v in saved.items() if k in merged and v is not None})
    try:
        return AppSettings.model_validate(merged)
    except ValidationError:
        logger.exception("Stored settings failed validation, using defaults")
        return AppSettings()


def get_settings() -> AppSettings:
    """Stored settings merged over the defaults."""
    saved = kvstore.get_json(SETTINGS_KEY, {}) or {}
    if not isinstance(saved, dict):
        logger.warning("Ignoring malformed settings record: %r", saved)
        saved = {}
    return _merged_over_defaults(saved)


def update_settings(update: AppSettingsUpdate | Dict[str, Any]) -> AppSettings:
    if isinstance(update, dict):
        update = AppSettingsUpdate.model_validate(update)
    changes = update.model_dump(exclude_none=True)
    updated = AppSettings()

    def merge(saved: Any) -> Dict[str, Any]:
        nonlocal updated
        saved = saved if isinstance(saved, dict) else {}
        current = _merged_over_defaults(saved).model_dump()
        current.update(changes)
        updated = AppSettings.model_validate(current)
        # Keys this version does not know about stay in the stored record.
        return {**saved, **updated.model_dump(mode="json")}

    kvstore.update_json(SETTINGS_KEY, merge, {})
    return updated


def get_history_days() -> int:
    return get_settings().history_days


def set_history_days(days: int) -> None:
    update_settings(AppSettingsUpdate(history_days=days))


def get_suggested_reps() -> int:
    return get_settings().suggested_reps


def set_suggested_reps(reps: int) -> None:
    update_settings(AppSettingsUpdate(suggested_reps=reps))


def get_weight_unit() -> WeightUnit:
    return get_settings().weight_unit


def set_weight_unit(unit: WeightUnit | str) -> None:
    update_settings(AppSettingsUpdate(weight_unit=normalize_weight_unit(unit)))


def get_health_sync_enabled() -> bool:
    # Without a configured endpoint there is nothing to sync to.
    if not settings.health_sync_url:
        return False
    return get_settings().health_sync


def set_health_sync_enabled(enabled: bool) -> None:
    update_settings(AppSettingsUpdate(health_sync=enabled))


def convert_weight(weight: float, from_unit: WeightUnit | str, to_unit: WeightUnit | str) -> float:
    src = normalize_weight_unit(from_unit)
    dst = normalize_weight_unit(to_unit)
    if src == dst:
        return weight
    if src == WeightUnit.kg:
        return weight * KG_PER_LB_FACTOR
    return weight / KG_PER_LB_FACTOR
