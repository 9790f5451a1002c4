# -*- coding: utf-8 -*-
"""Nutrition lookup clients.

Two upstream shapes are supported: an API-key service returning a JSON list
of per-serving nutrition rows, and the FatSecret platform API signed with
OAuth 1.0a. When the configured service fails, the built-in common-foods
table is searched instead.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from .foods import search_local_foods
from .models import NutritionItem, NutritionSearchResponse
from .oauth1 import sign_request
from .storage import save_recent_search

logger = logging.getLogger(__name__)

LOCAL_SOURCE = "local"


class NutritionLookupError(RuntimeError):
    """The nutrition service could not answer the query."""


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return None


class NinjasClient:
    """API-key nutrition service (``GET ?query=...`` with ``X-Api-Key``)."""

    name = "ninjas"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.nutrition_api_key
        self.base_url = base_url or settings.nutrition_api_url
        self.timeout = timeout if timeout is not None else settings.nutrition_timeout
        self.transport = transport

    def _item(self, raw: Dict[str, Any]) -> Optional[NutritionItem]:
        # Free-tier responses replace some numbers with a "premium only" string.
        if _to_float(raw.get("calories")) is None:
            return None
        data: Dict[str, Any] = {"name": str(raw.get("name") or "").strip()}
        for field in NutritionItem.model_fields:
            if field == "name":
                continue
            value = _to_float(raw.get(field))
            if value is not None and value >= 0:
                data[field] = value
        if not data["name"] or data.get("serving_size_g", 100.0) <= 0:
            return None
        return NutritionItem.model_validate(data)

    def search(self, query: str) -> List[NutritionItem]:
        if not self.api_key:
            raise NutritionLookupError("Nutrition API key not configured")
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(self.base_url, params={"query": query}, headers={"X-Api-Key": self.api_key})
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise NutritionLookupError(f"Nutrition API request failed: {exc}") from exc

        if isinstance(data, dict) and "items" in data:
            data = data["items"]
        if not isinstance(data, list):
            raise NutritionLookupError("Unexpected nutrition API response")
        items = [item for item in (self._item(row) for row in data if isinstance(row, dict)) if item]
        if data and not items:
            raise NutritionLookupError("Nutrition API returned no usable values (premium-only fields)")
        return items


_FATSECRET_SERVING = re.compile(r"^\s*Per\s+(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>g|ml)\b", re.IGNORECASE)
_FATSECRET_VALUE = re.compile(r"(?P<key>Calories|Fat|Carbs|Protein):\s*(?P<value>\d+(?:\.\d+)?)", re.IGNORECASE)
_FATSECRET_KEYS = {
    "calories": "calories",
    "fat": "fat_total_g",
    "carbs": "carbohydrates_total_g",
    "protein": "protein_g",
}


def parse_fatsecret_food(raw: Dict[str, Any]) -> Optional[NutritionItem]:
    """Turn a ``foods.search`` hit into an item.

    Only descriptions measured in grams (or ml) are usable, since diary math
    scales by serving weight.
    """
    desc = str(raw.get("food_description") or "")
    serving = _FATSECRET_SERVING.match(desc)
    if not serving:
        return None
    data: Dict[str, Any] = {
        "name": str(raw.get("food_name") or "").strip(),
        "serving_size_g": float(serving.group("amount")),
    }
    brand = str(raw.get("brand_name") or "").strip()
    if brand:
        data["name"] = f"{data['name']} ({brand})"
    for match in _FATSECRET_VALUE.finditer(desc):
        data[_FATSECRET_KEYS[match.group("key").lower()]] = float(match.group("value"))
    if not data["name"] or data["serving_size_g"] <= 0 or "calories" not in data:
        return None
    return NutritionItem.model_validate(data)


class FatSecretClient:
    """FatSecret ``foods.search`` with two-legged OAuth 1.0a signing."""

    name = "fatsecret"

    def __init__(
        self,
        *,
        consumer_key: Optional[str] = None,
        consumer_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_results: int = 20,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.consumer_key = consumer_key if consumer_key is not None else settings.fatsecret_consumer_key
        self.consumer_secret = consumer_secret if consumer_secret is not None else settings.fatsecret_consumer_secret
        self.base_url = base_url or settings.fatsecret_api_url
        self.timeout = timeout if timeout is not None else settings.nutrition_timeout
        self.max_results = max_results
        self.transport = transport

    def signed_params(self, query: str, **oauth: Any) -> Dict[str, str]:
        params = {
            "method": "foods.search",
            "search_expression": query,
            "format": "json",
            "max_results": str(self.max_results),
        }
        return sign_request(
            "GET",
            self.base_url,
            params,
            consumer_key=str(self.consumer_key),
            consumer_secret=str(self.consumer_secret),
            **oauth,
        )

    def search(self, query: str) -> List[NutritionItem]:
        if not self.consumer_key or not self.consumer_secret:
            raise NutritionLookupError("FatSecret credentials not configured")
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(self.base_url, params=self.signed_params(query))
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise NutritionLookupError(f"FatSecret request failed: {exc}") from exc

        if not isinstance(data, dict):
            raise NutritionLookupError("Unexpected FatSecret response")
        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise NutritionLookupError(f"FatSecret error: {message}")
        foods = (data.get("foods") or {}).get("food") or []
        # A single hit comes back as an object instead of a list.
        if isinstance(foods, dict):
            foods = [foods]
        return [item for item in (parse_fatsecret_food(f) for f in foods if isinstance(f, dict)) if item]


def get_provider(name: Optional[str] = None):
    provider = (name or settings.nutrition_provider or "").strip().lower()
    if provider == NinjasClient.name:
        return NinjasClient()
    if provider == FatSecretClient.name:
        return FatSecretClient()
    if provider in {"", LOCAL_SOURCE}:
        return None
    raise ValueError(f"Unknown nutrition provider: {provider}")


def search_nutrition(query: str, *, provider=None) -> NutritionSearchResponse:
    """Look up foods, falling back to the built-in table when the service fails.

    Raises ``NutritionLookupError`` only when the service failed and the
    built-in table has no match either.
    """
    query = (query or "").strip()
    if not query:
        raise ValueError("query must not be empty")
    if provider is None:
        provider = get_provider()

    if provider is None:
        response = NutritionSearchResponse(query=query, source=LOCAL_SOURCE, items=search_local_foods(query))
    else:
        try:
            response = NutritionSearchResponse(query=query, source=provider.name, items=provider.search(query))
        except NutritionLookupError as exc:
            logger.warning("Nutrition lookup via %s failed for %r: %s", provider.name, query, exc)
            fallback = search_local_foods(query)
            if not fallback:
                raise NutritionLookupError("Failed to fetch nutrition data") from exc
            response = NutritionSearchResponse(
                query=query,
                source=LOCAL_SOURCE,
                items=fallback,
                warnings=["Nutrition service unavailable; showing built-in foods"],
            )

    save_recent_search(query)
    return response
