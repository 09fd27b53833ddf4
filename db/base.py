# db/base.py
import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

from errors import BackendExecutionError, GatewayError
from models import BackendResult

LOG = logging.getLogger(__name__)


class Backend(ABC):
    """One configured database. execute() is the only operation the gateway needs."""

    # how this dialect spells "no limit" ahead of an OFFSET
    unbounded_limit = "LIMIT -1"

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> BackendResult:
        ...


def execute_statement(backend: Backend, sql: str, params: Sequence[Any] = ()) -> BackendResult:
    """Run one statement; any driver failure comes back as BackendExecutionError."""
    try:
        return backend.execute(sql, params)
    except GatewayError:
        raise
    except Exception as e:
        LOG.exception("backend %r failed", backend)
        raise BackendExecutionError(str(e)) from e
