"""Storage backends holding one JSON array per collection."""

from __future__ import annotations

import copy
import json
import logging
import os
import sqlite3
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...domain.errors import StorageError
from ...utils.datetime import format_datetime, utc_now

logger = logging.getLogger(__name__)


def _decode(raw: str, source: str) -> List[Dict[str, Any]]:
    try:
        documents = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageError(f"Corrupt collection data in {source}: {exc}") from exc
    if not isinstance(documents, list):
        raise StorageError(f"Collection data in {source} is not a JSON array")
    return documents


def _encode(documents: List[Dict[str, Any]]) -> str:
    return json.dumps(documents, indent=2, ensure_ascii=False, default=str)


class JsonFileBackend:
    """One ``<collection>.json`` file, replaced as a whole on every write."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def describe(self) -> str:
        return str(self._path)

    def _ensure_file(self) -> None:
        if self._path.exists():
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Unable to create {self._path}: {exc.strerror or exc}") from exc
        logger.info("Initialised empty collection file %s", self._path)

    def load(self) -> List[Dict[str, Any]]:
        self._ensure_file()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Unable to read {self._path}: {exc}") from exc
        return _decode(raw, str(self._path))

    def save(self, documents: List[Dict[str, Any]]) -> None:
        payload = _encode(documents)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Unable to write {self._path}: {exc}") from exc


class SQLiteDatabase:
    """SQLite file keeping each collection as one JSON document row."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._path = path
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS collections (
                    name TEXT PRIMARY KEY,
                    documents TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def collection(self, name: str) -> "SQLiteBackend":
        return SQLiteBackend(self, name)

    def describe(self, name: str) -> str:
        return f"{self._path}#{name}"

    def load(self, name: str) -> List[Dict[str, Any]]:
        try:
            with self._lock:
                cur = self._conn.execute(
                    "SELECT documents FROM collections WHERE name = ?", (name,)
                )
                row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Unable to read collection {name}: {exc}") from exc
        if not row:
            self.save(name, [])
            return []
        return _decode(row["documents"], self.describe(name))

    def save(self, name: str, documents: List[Dict[str, Any]]) -> None:
        payload = _encode(documents)
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT INTO collections (name, documents, updated_at) VALUES (?, ?, ?) "
                    "ON CONFLICT(name) DO UPDATE SET documents = excluded.documents, "
                    "updated_at = excluded.updated_at",
                    (name, payload, format_datetime(utc_now())),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Unable to write collection {name}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class SQLiteBackend:
    def __init__(self, database: SQLiteDatabase, name: str) -> None:
        self._database = database
        self._name = name

    def describe(self) -> str:
        return self._database.describe(self._name)

    def load(self) -> List[Dict[str, Any]]:
        return self._database.load(self._name)

    def save(self, documents: List[Dict[str, Any]]) -> None:
        self._database.save(self._name, documents)


class MemoryBackend:
    """Process-local collection, used for tests and throwaway deployments."""

    def __init__(self, documents: Optional[List[Dict[str, Any]]] = None) -> None:
        self._documents: List[Dict[str, Any]] = copy.deepcopy(documents or [])

    def describe(self) -> str:
        return "memory"

    def load(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._documents)

    def save(self, documents: List[Dict[str, Any]]) -> None:
        self._documents = copy.deepcopy(documents)
