# db/databricks_client.py
import logging
import time
from typing import Any, Sequence

from databricks.sql import connect

from db.base import Backend
from errors import BackendExecutionError
from models import BackendResult

LOG = logging.getLogger(__name__)


def _affected_rows(rowcount, rows):
    # older connectors report rowcount -1 for DML; the count then arrives as a
    # num_affected_rows result row. None means the count is unknown.
    if rowcount is not None and rowcount >= 0:
        return rowcount
    if len(rows) == 1 and "num_affected_rows" in rows[0]:
        return rows[0]["num_affected_rows"]
    return None


class DatabricksBackend(Backend):
    """Databricks SQL warehouse; one connection per statement."""

    unbounded_limit = "LIMIT ALL"

    def __init__(self, host: str, http_path: str, token: str, timeout: int = 120):
        self.host = host
        self.http_path = http_path
        self.token = token
        self.timeout = timeout

    def __repr__(self):
        return f"DatabricksBackend({self.host!r}, {self.http_path!r})"

    def execute(self, sql: str, params: Sequence[Any] = ()) -> BackendResult:
        started = time.perf_counter()
        try:
            conn = connect(server_hostname=self.host, http_path=self.http_path,
                           access_token=self.token, timeout=self.timeout)
        except Exception as e:
            LOG.warning("databricks connect to %s failed: %s", self.host, e)
            raise BackendExecutionError(str(e)) from e
        cur = conn.cursor()
        try:
            if params:
                cur.execute(sql, list(params))
            else:
                cur.execute(sql)
            cols = [c[0] for c in cur.description] if cur.description else []
            rows = [dict(zip(cols, r)) for r in cur.fetchall()] if cur.description else []
            changes = _affected_rows(cur.rowcount, rows)
            meta = {
                "duration": round((time.perf_counter() - started) * 1000, 3),
                "changes": changes,
                "rows_read": len(rows),
            }
            return BackendResult(rows=rows, meta=meta)
        except Exception as e:
            LOG.warning("databricks query failed: %s", e)
            raise BackendExecutionError(str(e)) from e
        finally:
            cur.close()
            conn.close()
