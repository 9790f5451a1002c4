# -*- coding: utf-8 -*-
"""Imports — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from ..config import settings
from ..preferences.models import WeightUnit, normalize_weight_unit
from .models import ImportResult, ImportTextRequest
from .strong import StrongImportError, import_from_strong_csv

router = APIRouter(prefix="/api/import", tags=["Import"])


def _run_import(csv_text: str, weight_unit: WeightUnit) -> ImportResult:
    try:
        return import_from_strong_csv(csv_text, weight_unit)
    except StrongImportError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to import workouts: {exc}") from exc


@router.post("/strong", response_model=ImportResult, summary="Import a Strong CSV export (file upload)")
def import_strong_file(
    file: UploadFile = File(...),
    weight_unit: str = Form(default=WeightUnit.lbs.value),
):
    max_bytes = int(settings.max_import_mb) * 1024 * 1024
    raw = file.file.read(max_bytes + 1)
    if len(raw) > max_bytes:
        raise HTTPException(status_code=400, detail=f"File too large: > {settings.max_import_mb} MB")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8 encoded") from exc
    return _run_import(text, normalize_weight_unit(weight_unit or WeightUnit.lbs))


@router.post("/strong/text", response_model=ImportResult, summary="Import Strong CSV text")
def import_strong_text(request: ImportTextRequest):
    return _run_import(request.csv_text, request.weight_unit)
