"""SQLite implementation of the record repository."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from ..contracts import Method, NotifyTarget, Outcome, Record, RecordWrite
from ..exceptions import ConfigError, StorageError
from .reconcile import reconcile_record
from .repository import Clock, RecordRepository, now_millis

logger = logging.getLogger(__name__)

TABLE = "kvlet"
COLUMNS = (
    "id",
    "state",
    "info",
    "method",
    "url",
    "response_code",
    "response",
    "created_at",
    "updated_at",
)
_SELECT = f"SELECT {', '.join(COLUMNS)} FROM {TABLE}"


class SQLiteRecordStore(RecordRepository):
    """Persist records in a single local SQLite file.

    A connection is opened for every operation and closed on return; each
    operation runs in its own transaction.
    """

    def __init__(self, db_path: str | Path, clock: Optional[Clock] = None):
        self.db_path = Path(db_path)
        self._clock = clock or now_millis
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create directory for {self.db_path}: {exc}") from exc
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Connection and schema management
    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open database {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            raise StorageError(f"database error on {self.db_path}: {exc}") from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE} (
                    id TEXT PRIMARY KEY,
                    state TEXT NOT NULL,
                    info TEXT,
                    method TEXT,
                    url TEXT,
                    response_code INTEGER,
                    response TEXT,
                    created_at INTEGER NOT NULL,
                    updated_at INTEGER NOT NULL
                )
                """
            )
            present = {row["name"] for row in conn.execute(f"PRAGMA table_info({TABLE})")}
        missing = [column for column in COLUMNS if column not in present]
        if missing:
            raise StorageError(
                f"schema mismatch in {self.db_path}: missing columns {', '.join(missing)}"
            )

    # ------------------------------------------------------------------
    # Row mapping
    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> Record:
        try:
            target = None
            if row["method"] is not None:
                target = NotifyTarget(method=Method(row["method"]), endpoint=row["url"] or "")
            last_response = None
            if row["response_code"] is not None:
                last_response = Outcome(
                    status_code=row["response_code"], body=row["response"] or ""
                )
            return Record(
                id=row["id"],
                state=row["state"],
                info=row["info"],
                notify_target=target,
                last_response=last_response,
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
        except ValueError as exc:
            raise StorageError(f"corrupt row for id {row['id']!r}: {exc}") from exc

    @staticmethod
    def _target_params(record: Record) -> tuple[Any, Any]:
        if record.notify_target is None:
            return None, None
        return record.notify_target.method.value, record.notify_target.endpoint

    def _fetch(self, conn: sqlite3.Connection, record_id: str) -> Record | None:
        row = conn.execute(f"{_SELECT} WHERE id = ?", (record_id,)).fetchone()
        return self._row_to_record(row) if row else None

    # ------------------------------------------------------------------
    # Repository API
    def lookup(self, record_id: str) -> Record | None:
        with self._connect() as conn:
            return self._fetch(conn, record_id)

    def reconcile_write(self, write: RecordWrite) -> Record:
        with self._connect() as conn:
            existing = self._fetch(conn, write.id)
            record = reconcile_record(write, existing, self._clock())
            method, url = self._target_params(record)
            if existing is None:
                logger.debug(f"Creating record {record.id}")
                conn.execute(
                    f"""
                    INSERT INTO {TABLE} (id, state, info, method, url, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.state,
                        record.info,
                        method,
                        url,
                        record.created_at,
                        record.updated_at,
                    ),
                )
            else:
                logger.debug(f"Updating record {record.id}")
                conn.execute(
                    f"""
                    UPDATE {TABLE}
                    SET state = ?, info = ?, method = ?, url = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (record.state, record.info, method, url, record.updated_at, record.id),
                )
        return record

    def record_outcome(self, record_id: str, status_code: int, body: str) -> None:
        outcome = Outcome(status_code=status_code, body=body)
        with self._connect() as conn:
            cur = conn.execute(
                f"""
                UPDATE {TABLE}
                SET response_code = ?, response = ?, updated_at = MAX(?, updated_at)
                WHERE id = ?
                """,
                (outcome.status_code, outcome.body, self._clock(), record_id),
            )
            if cur.rowcount == 0:
                raise StorageError(f"cannot record outcome: no record with id {record_id!r}")
        logger.debug(f"Recorded outcome {outcome.status_code} for {record_id}")

    def update_target(self, record_id: str, target: NotifyTarget) -> Record | None:
        with self._connect() as conn:
            cur = conn.execute(
                f"""
                UPDATE {TABLE}
                SET method = ?, url = ?, updated_at = MAX(?, updated_at)
                WHERE id = ?
                """,
                (target.method.value, target.endpoint, self._clock(), record_id),
            )
            if cur.rowcount == 0:
                return None
            return self._fetch(conn, record_id)

    def list(self, limit: int, state: Optional[str] = None) -> list[Record]:
        if limit < 0:
            raise ConfigError(f"limit must be non-negative, got {limit}")
        query = _SELECT
        params: list[Any] = []
        if state is not None:
            query += " WHERE state = ?"
            params.append(state)
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(limit)
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_record(row) for row in rows]
