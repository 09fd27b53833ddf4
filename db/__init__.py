from db.base import Backend, execute_statement
from db.registry import DatabaseRegistry, resolve_database

__all__ = ["Backend", "execute_statement", "DatabaseRegistry", "resolve_database"]
