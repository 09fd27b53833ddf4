# db/registry.py
from typing import Iterable, List, Tuple

from db.base import Backend
from errors import BadRequest, DatabaseNotFound
from sql_validator import IDENT_RE


class DatabaseRegistry:
    """Read-only mapping of database name -> Backend, fixed at startup."""

    def __init__(self, entries: Iterable[Tuple[str, Backend]] = ()):
        self._backends = {}
        for name, backend in entries:
            if not name or not IDENT_RE.fullmatch(name):
                raise ValueError(f"invalid database name: {name!r}")
            if not isinstance(backend, Backend):
                raise ValueError(f"database {name}: {backend!r} is not a Backend")
            if name in self._backends:
                raise ValueError(f"duplicate database name: {name}")
            self._backends[name] = backend

    def names(self) -> List[str]:
        return list(self._backends)

    def get(self, name: str):
        return self._backends.get(name)

    def __contains__(self, name):
        return name in self._backends

    def __len__(self):
        return len(self._backends)


def resolve_database(name: str, registry: DatabaseRegistry) -> Backend:
    if not name or not name.strip():
        raise BadRequest("Database name is required")
    backend = registry.get(name)
    if backend is None:
        raise DatabaseNotFound(name, registry.names())
    return backend
