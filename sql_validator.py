# sql_validator.py
import re
from typing import Tuple

from errors import BadRequest

# table and column names only; values are always bound, never interpolated
IDENT_RE = re.compile(r"^[A-Za-z0-9_]+$")


def sanitize_identifier(name: str, kind: str = "identifier") -> str:
    if not name:
        raise BadRequest(f"empty {kind}")
    if not isinstance(name, str) or not IDENT_RE.fullmatch(name):
        raise BadRequest(f"invalid {kind}: {name}")
    return name


def sanitize_table(name: str) -> str:
    if not name:
        raise BadRequest("Table name is required")
    return sanitize_identifier(name, "table name")


# Opt-in guard for the raw query endpoint (RAW_QUERY_READ_ONLY).
BAD_KEYWORDS = [
    r"\b(insert|update|delete|drop|create|alter|truncate|merge|grant|revoke|replace|attach|detach|vacuum|pragma)\b",
    r";\s*\S",                    # disallow multiple statements
    r"\binto\s+|outfile\b",       # disallow write/export style
]

READ_ONLY = re.compile(r"^\s*(select|with)\s+", re.IGNORECASE)


def is_safe_sql(sql: str) -> Tuple[bool, str]:
    if not sql or not sql.strip():
        return False, "empty query"
    if not READ_ONLY.match(sql):
        return False, "only SELECT queries are allowed"
    for pat in BAD_KEYWORDS:
        if re.search(pat, sql, re.IGNORECASE):
            return False, "disallowed pattern found in SQL"
    return True, "ok"
