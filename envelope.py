# envelope.py
# JSON shapes returned to clients.
from typing import Any, Dict, Iterable

from models import BackendResult


def success(result: BackendResult) -> Dict[str, Any]:
    return {"success": True, "results": list(result.rows), "meta": dict(result.meta)}


def failure(message: str) -> Dict[str, Any]:
    return {"success": False, "error": str(message)}


def error(message: str) -> Dict[str, Any]:
    return {"error": str(message)}


def database_not_found(name: str, available: Iterable[str]) -> Dict[str, Any]:
    return {"error": f"Database '{name}' not found", "available_databases": list(available)}
