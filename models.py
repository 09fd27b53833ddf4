# models.py
# plain containers passed between the translator, builder, backends and envelope
from dataclasses import dataclass, field
from typing import List, Any, Dict, Tuple


@dataclass(frozen=True)
class QueryFragment:
    where: str = ""
    order: str = ""
    limit: str = ""
    params: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class SqlStatement:
    sql: str
    params: Tuple[Any, ...] = ()


@dataclass
class BackendResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
