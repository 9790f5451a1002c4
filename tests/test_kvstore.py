# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import threading
import unittest
from pathlib import Path

from pydantic import BaseModel


class Note(BaseModel):
    id: str
    text: str


class TestKvStore(unittest.TestCase):
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

        cls.app_db = app_db
        cls.kvstore = kvstore
        cls.settings = settings
        app_db.init_app_db(settings.db_path)

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def setUp(self) -> None:
        with self.app_db.db_conn(self.settings.db_path) as conn:
            conn.execute("DELETE FROM kv")

    def test_update_json_writes_the_returned_value(self) -> None:
        self.assertEqual(self.kvstore.update_json("counter", lambda n: n + 1, 0), 1)
        self.assertEqual(self.kvstore.update_json("counter", lambda n: n + 1, 0), 2)
        self.assertEqual(self.kvstore.get_json("counter"), 2)

    def test_update_json_none_leaves_row(self) -> None:
        self.kvstore.set_json("names", ["a"])
        self.assertIsNone(self.kvstore.update_json("names", lambda names: None, []))
        self.assertEqual(self.kvstore.get_json("names"), ["a"])

    def test_update_json_rolls_back_on_error(self) -> None:
        self.kvstore.set_json("names", ["a"])

        def boom(names):
            raise RuntimeError("nope")

        with self.assertRaises(RuntimeError):
            self.kvstore.update_json("names", boom, [])
        self.assertEqual(self.kvstore.get_json("names"), ["a"])

    def test_undecodable_value_is_not_overwritten(self) -> None:
        with self.app_db.db_conn(self.settings.db_path) as conn:
            conn.execute("INSERT INTO kv (key, value, updated_at) VALUES ('broken', '{oops', 'now')")

        with self.assertRaises(ValueError):
            self.kvstore.update_json("broken", lambda value: {"fresh": True}, {})
        with self.app_db.db_conn(self.settings.db_path) as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = 'broken'").fetchone()
        self.assertEqual(row["value"], "{oops")

    def test_update_records_keeps_invalid_items(self) -> None:
        self.kvstore.set_json("notes", [{"id": "1", "text": "ok"}, {"id": "2"}])
        self.assertEqual([n.id for n in self.kvstore.load_records("notes", Note)], ["1"])

        self.kvstore.update_records("notes", Note, lambda notes: [*notes, Note(id="3", text="new")])
        self.assertEqual(
            self.kvstore.get_json("notes"),
            [{"id": "1", "text": "ok"}, {"id": "3", "text": "new"}, {"id": "2"}],
        )

    def test_update_records_refuses_non_list(self) -> None:
        self.kvstore.set_json("notes", {"id": "1"})
        self.assertEqual(self.kvstore.load_records("notes", Note), [])
        with self.assertRaises(ValueError):
            self.kvstore.update_records("notes", Note, lambda notes: [*notes, Note(id="2", text="x")])
        self.assertEqual(self.kvstore.get_json("notes"), {"id": "1"})

    def test_concurrent_updates_are_not_lost(self) -> None:
        workers = 20
        barrier = threading.Barrier(workers)
        errors = []

        def add(i: int) -> None:
            try:
                barrier.wait()
                self.kvstore.update_records("notes", Note, lambda notes: [*notes, Note(id=str(i), text="t")])
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=add, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        stored = self.kvstore.load_records("notes", Note)
        self.assertEqual(sorted(int(n.id) for n in stored), list(range(workers)))


if __name__ == "__main__":
    unittest.main()
