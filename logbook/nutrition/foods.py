# -*- coding: utf-8 -*-
"""Built-in common foods, used when the lookup API is unavailable.

Values are per 100 g.
"""

from __future__ import annotations

from typing import List

from .models import NutritionItem

# name, kcal, serving g, fat, sat fat, protein, sodium mg, potassium mg, cholesterol mg, carbs, fiber, sugar
_COMMON_FOODS = (
    ("apple", 52, 100, 0.2, 0, 0.3, 1, 107, 0, 14, 2.4, 10.3),
    ("banana", 89, 100, 0.3, 0.1, 1.1, 1, 358, 0, 22.8, 2.6, 12.2),
    ("orange", 47, 100, 0.1, 0, 0.9, 0, 181, 0, 11.8, 2.4, 9.4),
    ("chicken breast", 165, 100, 3.6, 1, 31, 74, 256, 85, 0, 0, 0),
    ("rice", 130, 100, 0.3, 0.1, 2.7, 1, 35, 0, 28.2, 0.4, 0.1),
    ("bread", 265, 100, 3.2, 0.7, 9.4, 495, 126, 0, 49, 2.7, 5.1),
    ("milk", 42, 100, 1, 0.6, 3.4, 43, 150, 5, 5, 0, 5.1),
    ("egg", 155, 100, 11, 3.3, 13, 124, 126, 373, 1.1, 0, 1.1),
    ("beef", 250, 100, 15, 6, 26, 72, 318, 90, 0, 0, 0),
    ("salmon", 208, 100, 13, 3.1, 20, 59, 363, 55, 0, 0, 0),
    ("broccoli", 34, 100, 0.4, 0.1, 2.8, 33, 316, 0, 6.6, 2.6, 1.7),
    ("carrot", 41, 100, 0.2, 0, 0.9, 69, 320, 0, 9.6, 2.8, 4.7),
    ("potato", 77, 100, 0.1, 0, 2, 6, 421, 0, 17, 2.2, 0.8),
    ("pasta", 158, 100, 0.9, 0.2, 5.8, 1, 58, 0, 31, 1.8, 0.6),
    ("spinach", 23, 100, 0.4, 0.1, 2.9, 79, 558, 0, 3.6, 2.2, 0.4),
    ("avocado", 160, 100, 14.7, 2.1, 2, 7, 485, 0, 8.5, 6.7, 0.7),
    ("yogurt", 59, 100, 0.4, 0.1, 10, 36, 141, 5, 3.6, 0, 3.2),
    ("oatmeal", 68, 100, 1.4, 0.2, 2.4, 2, 61, 0, 12, 1.7, 0.5),
    ("peanut butter", 588, 100, 50, 10, 25, 426, 649, 0, 20, 6, 9),
    ("almonds", 579, 100, 49.9, 3.8, 21.2, 1, 733, 0, 21.6, 12.5, 4.4),
)

_FIELDS = (
    "name",
    "calories",
    "serving_size_g",
    "fat_total_g",
    "fat_saturated_g",
    "protein_g",
    "sodium_mg",
    "potassium_mg",
    "cholesterol_mg",
    "carbohydrates_total_g",
    "fiber_g",
    "sugar_g",
)

COMMON_FOODS: List[NutritionItem] = [
    NutritionItem.model_validate(dict(zip(_FIELDS, row))) for row in _COMMON_FOODS
]


def search_local_foods(query: str) -> List[NutritionItem]:
    q = (query or "").strip().lower()
    return [food.model_copy() for food in COMMON_FOODS if q in food.name.lower()]
