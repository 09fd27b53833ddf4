# db/sqlite_client.py
import logging
import sqlite3
import time
from typing import Any, Sequence

from db.base import Backend
from errors import BackendExecutionError
from models import BackendResult

LOG = logging.getLogger(__name__)


class SqliteBackend(Backend):
    def __init__(self, path: str, timeout: float = 30.0):
        self.path = path
        self.timeout = timeout

    def __repr__(self):
        return f"SqliteBackend({self.path!r})"

    def execute(self, sql: str, params: Sequence[Any] = ()) -> BackendResult:
        started = time.perf_counter()
        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            cur = conn.execute(sql, tuple(params))
            rows = [dict(r) for r in cur.fetchall()] if cur.description else []
            conn.commit()
            changes = cur.rowcount if cur.rowcount > 0 else 0
            meta = {
                "duration": round((time.perf_counter() - started) * 1000, 3),
                "changes": changes,
                "last_row_id": cur.lastrowid,
                "rows_read": len(rows),
                "rows_written": changes,
            }
            return BackendResult(rows=rows, meta=meta)
        except sqlite3.Error as e:
            LOG.warning("sqlite %s: %s", self.path, e)
            raise BackendExecutionError(str(e)) from e
        finally:
            conn.close()
