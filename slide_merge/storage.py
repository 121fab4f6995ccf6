"""
SQLite persistence for slides and presentation groups.

Two collections, ``slides`` and ``presentations``, each a table of
``(id, data)`` rows where ``data`` is the JSON record produced by the model's
``to_dict``.  Upserts are last-write-wins by id.
"""
from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from .models import PresentationGroup, Slide

logger = logging.getLogger(__name__)

SLIDES = "slides"
PRESENTATIONS = "presentations"
COLLECTIONS = (SLIDES, PRESENTATIONS)

_SCHEMA_SQL = "\n".join(
    f"CREATE TABLE IF NOT EXISTS {name} (id TEXT PRIMARY KEY, data TEXT NOT NULL);"
    for name in COLLECTIONS
)


class SlideStore:
    """
    Embedded key-value store for the slide collection.

    ``db_path`` defaults to an in-memory database.
    """

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        self._db_path = str(db_path)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_tables()
        logger.debug("SlideStore initialized: %s", self._db_path)

    def _ensure_tables(self) -> None:
        self._conn.executescript(_SCHEMA_SQL)
        self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "SlideStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @staticmethod
    def _table(collection: str) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection '{collection}'. Available: {list(COLLECTIONS)}")
        return collection

    # -- Generic record API -------------------------------------------------

    def bulk_upsert(self, collection: str, records: Iterable[Dict[str, Any]]) -> int:
        """Insert or replace *records* keyed by their ``id``; returns the row count."""
        table = self._table(collection)
        rows = [(r["id"], json.dumps(r)) for r in records]
        with self._lock:
            self._conn.executemany(
                f"INSERT INTO {table} (id, data) VALUES (?, ?) "
                f"ON CONFLICT(id) DO UPDATE SET data=excluded.data",
                rows,
            )
            self._conn.commit()
        logger.debug("Upserted %d records into %s", len(rows), table)
        return len(rows)

    def read_all(self, collection: str) -> List[Dict[str, Any]]:
        """All records in first-insertion order."""
        table = self._table(collection)
        with self._lock:
            rows = self._conn.execute(f"SELECT data FROM {table} ORDER BY rowid").fetchall()
        return [json.loads(row["data"]) for row in rows]

    def clear(self, collection: str) -> None:
        table = self._table(collection)
        with self._lock:
            self._conn.execute(f"DELETE FROM {table}")
            self._conn.commit()

    # -- Typed helpers ------------------------------------------------------

    def save_slides(self, slides: Iterable[Slide]) -> int:
        return self.bulk_upsert(SLIDES, (s.to_dict() for s in slides))

    def save_presentations(self, groups: Iterable[PresentationGroup]) -> int:
        return self.bulk_upsert(PRESENTATIONS, (g.to_dict() for g in groups))

    def get_slides(self) -> List[Slide]:
        return [Slide.from_dict(r) for r in self.read_all(SLIDES)]

    def get_presentations(self) -> List[PresentationGroup]:
        return [PresentationGroup.from_dict(r) for r in self.read_all(PRESENTATIONS)]

    def clear_database(self) -> None:
        """Drop every slide and group."""
        for collection in COLLECTIONS:
            self.clear(collection)
        logger.info("Cleared slide database")
