# -*- coding: utf-8 -*-
"""Key-value JSON storage on top of the app SQLite database."""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Set, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .app_db import db_conn, init_app_db
from .config import settings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_initialized: Set[str] = set()

# Serializes read-modify-write cycles within the process; BEGIN IMMEDIATE
# covers other processes sharing the database file.
_write_lock = threading.RLock()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _db_path() -> Path:
    path = settings.db_path
    key = str(path)
    if key not in _initialized:
        init_app_db(path)
        _initialized.add(key)
    return path


def _upsert(conn: Any, key: str, value: Any) -> None:
    conn.execute(
        """
        INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
        """,
        (key, json.dumps(value, ensure_ascii=False), _utc_now()),
    )


def get_json(key: str, default: Any = None) -> Any:
    """Return the decoded value stored under ``key``.

    Missing keys and values that no longer decode both yield ``default``;
    the latter is logged.
    """
    with db_conn(_db_path()) as conn:
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
    if row is None:
        return default
    try:
        return json.loads(row["value"])
    except (TypeError, ValueError):
        logger.exception("Stored value for %r is not valid JSON", key)
        return default


def set_json(key: str, value: Any) -> None:
    with _write_lock, db_conn(_db_path()) as conn:
        _upsert(conn, key, value)


def update_json(key: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
    """Read, transform and write back ``key`` in one transaction.

    ``fn`` receives the decoded value (``default`` when the key is missing)
    and returns the value to store. Returning ``None`` leaves the row as it
    is. A stored value that no longer decodes raises ``ValueError`` instead
    of being overwritten.
    """
    with _write_lock, db_conn(_db_path()) as conn:
        conn.execute("BEGIN IMMEDIATE")
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            current = default
        else:
            try:
                current = json.loads(row["value"])
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Stored value for {key!r} is not valid JSON") from exc
        value = fn(current)
        if value is not None:
            _upsert(conn, key, value)
        return value


def split_records(raw: Any, model: Type[M], key: str) -> Tuple[List[M], List[Any]]:
    """Validate a stored list; returns ``(records, rejected raw items)``."""
    if raw is None:
        return [], []
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list under {key!r}, got {type(raw).__name__}")
    records: List[M] = []
    rejected: List[Any] = []
    for item in raw:
        try:
            records.append(model.model_validate(item))
        except ValidationError:
            rejected.append(item)
    return records, rejected


def load_records(key: str, model: Type[M]) -> List[M]:
    """Records stored under ``key``; malformed items are logged and skipped."""
    try:
        records, rejected = split_records(get_json(key, []), model, key)
    except ValueError:
        logger.warning("Ignoring malformed record list under %r", key)
        return []
    for item in rejected:
        logger.warning("Skipping malformed record under %r: %r", key, item)
    return records


def update_records(key: str, model: Type[M], fn: Callable[[List[M]], Optional[List[M]]]) -> Optional[List[M]]:
    """``update_json`` for a list of ``model`` records.

    ``fn`` only sees the items that validate and returns the new list, or
    ``None`` to leave storage untouched. Items that do not validate are
    written back unchanged after the updated records.
    """
    result: Optional[List[M]] = None

    def apply(raw: Any) -> Optional[List[Any]]:
        nonlocal result
        records, rejected = split_records(raw, model, key)
        updated = fn(records)
        if updated is None:
            return None
        if rejected:
            logger.warning("Keeping %d malformed records under %r", len(rejected), key)
        result = updated
        return [r.model_dump(mode="json") for r in updated] + rejected

    update_json(key, apply, [])
    return result
