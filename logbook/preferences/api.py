# -*- coding: utf-8 -*-
"""Preferences — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from .models import AppSettings, AppSettingsUpdate, WeightConversion, WeightUnit
from .storage import convert_weight, get_health_sync_enabled, get_settings, update_settings

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("", response_model=AppSettings, summary="Get settings")
def read_settings():
    current = get_settings()
    current.health_sync = get_health_sync_enabled()
    return current


@router.patch("", response_model=AppSettings, summary="Update settings (partial)")
def patch_settings(request: AppSettingsUpdate):
    return update_settings(request)


@router.get("/convert", response_model=WeightConversion, summary="Convert a weight between units")
def convert(
    weight: float = Query(..., ge=0),
    from_unit: WeightUnit = Query(...),
    to_unit: WeightUnit = Query(...),
):
    result = convert_weight(weight, from_unit, to_unit)
    return WeightConversion(weight=weight, from_unit=from_unit, to_unit=to_unit, result=round(result, 2))
