# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import threading
import unittest
from datetime import datetime, timedelta
from pathlib import Path


class TestWorkouts(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="logbook-test-"))
        data_root = cls._tmp / "data"
        os.environ["LOGBOOK_DATA_ROOT"] = str(data_root)
        os.environ["LOGBOOK_DB_PATH"] = str(data_root / "logbook.db")
        os.environ.pop("HEALTH_SYNC_URL", None)

        for name in list(sys.modules.keys()):
            if name == "logbook" or name.startswith("logbook."):
                sys.modules.pop(name, None)

        from logbook import app_db, dates, kvstore  # noqa: WPS433
        from logbook.config import settings
        from logbook.workouts import models, stats, storage

        cls.app_db = app_db
        cls.dates = dates
        cls.kvstore = kvstore
        cls.settings = settings
        cls.models = models
        cls.stats = stats
        cls.storage = storage
        app_db.init_app_db(settings.db_path)

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def setUp(self) -> None:
        with self.app_db.db_conn(self.settings.db_path) as conn:
            conn.execute("DELETE FROM kv")

    def _exercise(self, name, *sets):
        return self.models.Exercise(
            id=self.storage.new_id(),
            name=name,
            sets=[self.models.WorkoutSet(id=self.storage.new_id(), weight=w, reps=r) for w, r in sets],
        )

    def _stored_workout(self, when: datetime, unit: str, *exercises):
        workout = self.models.Workout(
            id=self.storage.new_id(),
            date=self.dates.to_iso(when),
            exercises=list(exercises),
            weight_unit=unit,
        )
        self.storage.save_workouts_list([*self.storage.get_workouts(), workout])
        return workout

    # ---- storage ----

    def test_save_workout_prepends_and_records_names(self) -> None:
        first = self.storage.save_workout([self._exercise("Squat", ("100", "5"))], duration=1800)
        second = self.storage.save_workout([self._exercise("Bench Press", ("80", "8"))], weight_unit="lbs")

        workouts = self.storage.get_workouts()
        self.assertEqual([w.id for w in workouts], [second.id, first.id])
        self.assertEqual(workouts[0].weight_unit.value, "lbs")
        self.assertEqual(workouts[1].duration, 1800)
        self.assertEqual(self.storage.get_all_exercises(), ["Squat", "Bench Press"])
        self.assertEqual(self.storage.get_workout_by_id(first.id).exercises[0].name, "Squat")
        self.assertIsNone(self.storage.get_workout_by_id("missing"))

    def test_update_and_delete(self) -> None:
        workout = self.storage.save_workout([self._exercise("Squat", ("100", "5"))])
        edited = workout.model_copy(update={"exercises": [self._exercise("Front Squat", ("70", "5"))]})

        self.assertTrue(self.storage.update_workout(edited, "lbs"))
        stored = self.storage.get_workout_by_id(workout.id)
        self.assertEqual(stored.exercises[0].name, "Front Squat")
        self.assertEqual(stored.weight_unit.value, "lbs")
        self.assertIn("Front Squat", self.storage.get_exercise_history())

        ghost = edited.model_copy(update={"id": "ghost"})
        self.assertFalse(self.storage.update_workout(ghost))

        self.assertTrue(self.storage.delete_workout(workout.id))
        self.assertFalse(self.storage.delete_workout(workout.id))
        self.assertEqual(self.storage.get_workouts(), [])

    def test_malformed_records_are_skipped(self) -> None:
        good = self.storage.save_workout([self._exercise("Squat", ("100", "5"))])
        raw = self.kvstore.get_json(self.storage.WORKOUTS_KEY)
        self.kvstore.set_json(self.storage.WORKOUTS_KEY, [*raw, {"exercises": "nope"}])
        self.assertEqual([w.id for w in self.storage.get_workouts()], [good.id])

    def test_malformed_records_survive_writes(self) -> None:
        broken = {"id": "old", "exercises": [{"name": ""}]}
        self.kvstore.set_json(self.storage.WORKOUTS_KEY, [broken])

        saved = self.storage.save_workout([self._exercise("Squat", ("100", "5"))])
        self.assertIn(broken, self.kvstore.get_json(self.storage.WORKOUTS_KEY))

        saved.duration = 600
        self.assertTrue(self.storage.update_workout(saved))
        self.assertTrue(self.storage.delete_workout(saved.id))
        self.storage.save_workouts_list([])
        self.assertEqual(self.kvstore.get_json(self.storage.WORKOUTS_KEY), [broken])

        self.kvstore.set_json(self.storage.TEMPLATES_KEY, [{"name": 3}])
        self.storage.save_workout_as_template(saved, "Legs")
        self.assertEqual(len(self.kvstore.get_json(self.storage.TEMPLATES_KEY)), 2)

    def test_concurrent_saves_keep_every_workout(self) -> None:
        workers = 10
        barrier = threading.Barrier(workers)

        def save(i: int) -> None:
            barrier.wait()
            self.storage.save_workout([self._exercise(f"Lift {i}", ("50", "5"))])

        threads = [threading.Thread(target=save, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(self.storage.get_workouts()), workers)
        self.assertEqual(len(self.storage.get_exercise_history()), workers)

    def test_templates(self) -> None:
        workout = self.storage.save_workout([self._exercise("Deadlift", ("140", "5"))])
        template = self.storage.save_workout_as_template(workout, "Pull Day")

        self.assertTrue(template.id.startswith(f"{workout.id}_template_"))
        self.assertEqual([t.name for t in self.storage.get_workout_templates()], ["Pull Day"])
        self.assertTrue(self.storage.delete_workout_template(template.id))
        self.assertFalse(self.storage.delete_workout_template(template.id))

    def test_active_workout(self) -> None:
        self.assertIsNone(self.storage.get_active_workout())

        self.storage.save_active_workout([self._exercise("Row", ("60", "10"))], "lbs")
        active = self.storage.get_active_workout()
        self.assertEqual(active.exercises[0].name, "Row")
        self.assertEqual(active.weight_unit.value, "lbs")
        self.assertIsNotNone(active.timestamp)

        self.storage.save_active_workout([])
        self.assertIsNone(self.storage.get_active_workout())

    def test_active_workout_legacy_list_format(self) -> None:
        legacy = [self._exercise("Curl", ("12", "10")).model_dump()]
        self.kvstore.set_json(self.storage.ACTIVE_WORKOUT_KEY, legacy)

        active = self.storage.get_active_workout()
        self.assertEqual(active.exercises[0].name, "Curl")
        self.assertEqual(active.weight_unit.value, "kg")

    def test_search_exercises(self) -> None:
        self.storage.update_exercise_history(
            [self._exercise(n) for n in ("Incline Bench Press", "Leg Press", "Bench Press", "Squat")]
        )
        self.assertEqual(self.storage.search_exercises("bench"), ["Bench Press", "Incline Bench Press"])
        self.assertEqual(
            self.storage.search_exercises("PRESS"),
            ["Bench Press", "Incline Bench Press", "Leg Press"],
        )
        self.assertEqual(self.storage.search_exercises("  "), [])

    def test_workout_calendar(self) -> None:
        squat = self._exercise("Squat", ("100", "5"))
        self._stored_workout(datetime(2024, 3, 5, 10, 0), "kg", squat)
        self._stored_workout(datetime(2024, 3, 5, 18, 0), "kg", squat)
        self._stored_workout(datetime(2024, 3, 20, 9, 0), "kg", squat)
        self._stored_workout(datetime(2024, 4, 1, 9, 0), "kg", squat)

        self.assertEqual(
            self.storage.get_workout_calendar(2024, 3),
            {"2024-03-05": 2, "2024-03-20": 1},
        )

    def test_clear_all_data(self) -> None:
        self.storage.save_workout([self._exercise("Squat", ("100", "5"))])
        self.storage.clear_all_data()
        self.assertEqual(self.storage.get_workouts(), [])
        self.assertEqual(self.storage.get_exercise_history(), [])

    # ---- stats ----

    def test_formulas(self) -> None:
        self.assertAlmostEqual(self.stats.estimate_one_rep_max(100, 5), 112.5)
        self.assertAlmostEqual(self.stats.estimate_one_rep_max(100, 1), 100.0)
        self.assertAlmostEqual(self.stats.estimate_one_rep_max(100, 40), 3600.0)
        self.assertEqual(self.stats.estimate_one_rep_max(0, 5), 0.0)
        self.assertAlmostEqual(self.stats.suggested_weight(112.5, 8), 112.5 * (1.0278 - 0.0278 * 8))
        self.assertEqual(self.stats.suggested_weight(0, 8), 0.0)

    def test_to_number(self) -> None:
        self.assertEqual(self.stats.to_number("12.5kg"), 12.5)
        self.assertEqual(self.stats.to_number(" 7"), 7.0)
        self.assertEqual(self.stats.to_number("abc"), 0.0)
        self.assertEqual(self.stats.to_number(""), 0.0)
        self.assertEqual(self.stats.to_number(3), 3.0)

    def test_best_performance_is_highest_volume(self) -> None:
        now = datetime.now()
        self._stored_workout(now, "kg", self._exercise("Bench Press", ("100", "5"), ("80", "10")))
        self._stored_workout(now - timedelta(days=1), "kg", self._exercise("Bench Press", ("120", "0")))

        best = self.stats.get_best_performance("bench press")
        self.assertEqual((best.weight, best.reps, best.set_index), ("80", "10", 1))
        self.assertEqual(best.volume, 800)
        self.assertEqual(len(best.all_sets), 2)
        self.assertIsNone(self.stats.get_best_performance("Squat"))

    def test_max_weight_compares_across_units(self) -> None:
        now = datetime.now()
        kg_workout = self._stored_workout(now, "kg", self._exercise("Squat", ("100", "5")))
        lbs_workout = self._stored_workout(now - timedelta(days=2), "lbs", self._exercise("Squat", ("225", "3")))

        heaviest = self.stats.get_max_weight("Squat")
        self.assertEqual(heaviest.workout_id, lbs_workout.id)
        self.assertEqual(heaviest.weight, "225")
        self.assertEqual(heaviest.weight_unit.value, "lbs")
        self.assertNotEqual(heaviest.workout_id, kg_workout.id)

    def test_history_window(self) -> None:
        now = datetime.now()
        self._stored_workout(now - timedelta(days=60), "kg", self._exercise("Deadlift", ("200", "5")))
        self._stored_workout(now - timedelta(days=3), "kg", self._exercise("Deadlift", ("150", "5")))

        self.assertEqual(self.stats.get_max_weight("Deadlift", 30).weight, "150")
        self.assertEqual(self.stats.get_max_weight("Deadlift").weight, "200")
        self.assertEqual(len(self.stats.get_exercise_stats_by_workout("Deadlift", 30)), 1)

    def test_exercise_stats_newest_first(self) -> None:
        now = datetime.now()
        self._stored_workout(now - timedelta(days=5), "kg", self._exercise("Curl", ("10", "12")))
        self._stored_workout(now, "kg", self._exercise("Curl", ("12", "10"), ("12", "9")))

        sets = self.stats.get_exercise_stats("Curl")
        self.assertEqual([(s.weight, s.reps) for s in sets][-1], ("10", "12"))
        self.assertEqual(len(sets), 3)

    def test_exercise_summary(self) -> None:
        self._stored_workout(datetime.now(), "kg", self._exercise("Bench Press", ("100", "5"), ("90", "5")))

        summary = self.stats.exercise_summary("Bench Press")
        self.assertEqual(summary.estimated_one_rep_max, 112.5)
        self.assertEqual(summary.target_reps, 8)
        self.assertEqual([s.reps for s in summary.suggested_weights], [1, 2, 3, 5, 8, 10, 12, 15])
        self.assertEqual(summary.personal_bests["5"].weight, 100)
        self.assertEqual(summary.progress.total_volume[0].value, 950)

        empty = self.stats.exercise_summary("Nothing")
        self.assertIsNone(empty.best_performance)
        self.assertEqual(empty.suggested_weights, [])


if __name__ == "__main__":
    unittest.main()
