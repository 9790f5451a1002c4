# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import unittest
from datetime import date
from pathlib import Path


class TestNutritionDiary(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="logbook-test-"))
        data_root = cls._tmp / "data"
        os.environ["LOGBOOK_DATA_ROOT"] = str(data_root)
        os.environ["LOGBOOK_DB_PATH"] = str(data_root / "logbook.db")

        for name in list(sys.modules.keys()):
            if name == "logbook" or name.startswith("logbook."):
                sys.modules.pop(name, None)

        from logbook import app_db, kvstore  # noqa: WPS433
        from logbook.config import settings
        from logbook.nutrition import models, storage

        cls.app_db = app_db
        cls.kvstore = kvstore
        cls.settings = settings
        cls.models = models
        cls.storage = storage
        app_db.init_app_db(settings.db_path)

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def setUp(self) -> None:
        with self.app_db.db_conn(self.settings.db_path) as conn:
            conn.execute("DELETE FROM kv")
        self.chicken = self.models.NutritionItem(
            name="chicken breast", calories=165, protein_g=31, fat_total_g=3.6, carbohydrates_total_g=0
        )
        self.rice = self.models.NutritionItem(
            name="rice", calories=130, protein_g=2.7, fat_total_g=0.3, carbohydrates_total_g=28.2
        )

    def test_round_half_up(self) -> None:
        self.assertEqual(self.storage.round_half_up(2.5), 3)
        self.assertEqual(self.storage.round_half_up(0.5), 1)
        self.assertEqual(self.storage.round_half_up(2.49), 2)

    def test_add_scales_by_serving_and_totals(self) -> None:
        entry = self.storage.add_to_diary("2024-05-01", "lunch", self.chicken, 150)
        self.assertEqual(entry.calories, 248)  # 247.5 rounds up
        self.assertEqual(entry.protein, 47)  # 46.5 rounds up
        self.assertEqual(entry.fat, 5)
        self.assertEqual(entry.carbs, 0)

        self.storage.add_to_diary("2024-05-01", "dinner", self.rice, 200)
        diary = self.storage.get_diary_for_date("2024-05-01")
        self.assertEqual(len(diary.entries), 2)
        totals = self.storage.calculate_daily_nutrition(diary)
        self.assertEqual(totals.calories, 248 + 260)
        self.assertEqual(totals.protein, 47 + 5)
        self.assertEqual(totals.carbs, 56)
        self.assertEqual(totals.fat, 5 + 1)

    def test_missing_day(self) -> None:
        self.assertIsNone(self.storage.get_diary_for_date("2024-05-02"))
        self.assertEqual(self.storage.calculate_daily_nutrition(None), self.models.NutritionTotals())

    def test_remove_recomputes_totals(self) -> None:
        first = self.storage.add_to_diary("2024-05-01", "lunch", self.chicken, 100)
        self.storage.add_to_diary("2024-05-01", "lunch", self.rice, 100)

        self.assertTrue(self.storage.remove_from_diary("2024-05-01", first.id))
        self.assertFalse(self.storage.remove_from_diary("2024-05-01", first.id))
        self.assertFalse(self.storage.remove_from_diary("1999-01-01", first.id))
        self.assertEqual(self.storage.get_diary_for_date("2024-05-01").totals.calories, 130)

    def test_update_entry(self) -> None:
        entry = self.storage.add_to_diary("2024-05-01", "breakfast", self.chicken, 100)

        updated = self.storage.update_diary_entry("2024-05-01", entry.id, quantity=50, meal="snack")
        self.assertEqual(updated.calories, 83)  # 82.5 rounds up
        self.assertEqual(updated.meal.value, "snack")
        self.assertEqual(self.storage.get_diary_for_date("2024-05-01").totals.calories, 83)

        self.assertIsNone(self.storage.update_diary_entry("2024-05-01", "missing", quantity=10))
        with self.assertRaises(ValueError):
            self.storage.update_diary_entry("2024-05-01", entry.id, quantity=0)

    def test_date_range_is_inclusive(self) -> None:
        for day in ("2024-04-30", "2024-05-01", "2024-05-03", "2024-05-04"):
            self.storage.add_to_diary(day, "lunch", self.rice, 100)
        entries = self.storage.get_diary_entries_for_date_range("2024-05-01", "2024-05-03")
        self.assertEqual([e.date for e in entries], ["2024-05-01", "2024-05-03"])

    def test_trends_fill_missing_days(self) -> None:
        self.storage.add_to_diary("2024-01-01", "lunch", self.rice, 100)
        self.storage.add_to_diary("2024-01-03", "lunch", self.chicken, 100)
        self.storage.add_to_diary("2023-12-31", "lunch", self.chicken, 100)

        trends = self.storage.get_nutrition_trends(3, date(2024, 1, 3))
        self.assertEqual((trends.start, trends.end), ("2024-01-01", "2024-01-03"))
        self.assertEqual([d.date for d in trends.days], ["2024-01-01", "2024-01-02", "2024-01-03"])
        self.assertEqual([d.calories for d in trends.days], [130, 0, 165])
        self.assertEqual(trends.averages.calories, 98)  # 295 / 3

        with self.assertRaises(ValueError):
            self.storage.get_nutrition_trends(0)

    def test_favorites(self) -> None:
        self.assertTrue(self.storage.save_favorite_food(self.chicken))
        self.assertFalse(self.storage.save_favorite_food(self.chicken))
        self.assertTrue(self.storage.is_favorite_food("chicken breast"))
        self.assertEqual([f.name for f in self.storage.get_favorite_foods()], ["chicken breast"])

        self.assertTrue(self.storage.remove_favorite_food("chicken breast"))
        self.assertFalse(self.storage.remove_favorite_food("chicken breast"))
        self.assertFalse(self.storage.is_favorite_food("chicken breast"))

    def test_malformed_days_survive_writes(self) -> None:
        broken = {"date": "2024-04-01", "entries": "lost"}
        self.kvstore.set_json(self.storage.DIARY_STORAGE_KEY, {"2024-04-01": broken})

        entry = self.storage.add_to_diary("2024-05-01", "lunch", self.rice, 100)
        self.assertIsNone(self.storage.get_diary_for_date("2024-04-01"))
        self.assertTrue(self.storage.remove_from_diary("2024-05-01", entry.id))
        self.assertEqual(self.kvstore.get_json(self.storage.DIARY_STORAGE_KEY)["2024-04-01"], broken)

        with self.assertRaises(ValueError):
            self.storage.add_to_diary("2024-04-01", "lunch", self.rice, 100)
        self.assertEqual(self.kvstore.get_json(self.storage.DIARY_STORAGE_KEY)["2024-04-01"], broken)

    def test_malformed_favorites_survive_writes(self) -> None:
        broken = {"name": "", "calories": -1}
        self.kvstore.set_json(self.storage.FAVORITES_STORAGE_KEY, [broken])

        self.assertTrue(self.storage.save_favorite_food(self.rice))
        self.assertEqual([f.name for f in self.storage.get_favorite_foods()], ["rice"])
        self.assertTrue(self.storage.remove_favorite_food("rice"))
        self.assertEqual(self.kvstore.get_json(self.storage.FAVORITES_STORAGE_KEY), [broken])

    def test_recent_searches(self) -> None:
        for i in range(12):
            self.storage.save_recent_search(f"food {i}")
        self.storage.save_recent_search("food 5")

        recent = self.storage.get_recent_searches()
        self.assertEqual(len(recent), 10)
        self.assertEqual(recent[0], "food 11")
        self.assertEqual(recent.count("food 5"), 1)
        self.assertNotIn("food 0", recent)

    def test_format_date(self) -> None:
        self.assertEqual(self.storage.format_date_to_yyyymmdd(date(2024, 3, 7)), "2024-03-07")


if __name__ == "__main__":
    unittest.main()
