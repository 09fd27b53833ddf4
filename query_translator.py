# query_translator.py
# Query-string -> WHERE / ORDER BY / LIMIT fragments with bound parameters.
#
#   ?age=25&sort_by=name&order=desc&limit=10&offset=20
#   -> WHERE age = ?   ORDER BY name DESC   LIMIT 10 OFFSET 20   params (25,)
#
# Every non-control key is an equality filter; filters are ANDed in the
# order the keys first appear so the generated SQL is deterministic.

import logging
import re
from typing import Any, Iterable, Mapping, Tuple, Union

from errors import BadRequest
from models import QueryFragment
from sql_validator import sanitize_identifier

LOG = logging.getLogger(__name__)

CONTROL_KEYS = ("sort_by", "order", "limit", "offset")
SORT_DIRECTIONS = {"asc": "ASC", "desc": "DESC"}

INT_RE = re.compile(r"^-?(0|[1-9][0-9]*)$")
FLOAT_RE = re.compile(r"^-?(0|[1-9][0-9]*)\.[0-9]+$")
INT64_MIN, INT64_MAX = -2 ** 63, 2 ** 63 - 1

QueryParams = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def coerce_value(raw: Any) -> Any:
    """Bind canonical numbers as numbers; anything else stays as given."""
    if not isinstance(raw, str):
        return raw
    if INT_RE.match(raw):
        n = int(raw)
        # wider than a signed 64-bit column stays text
        return n if INT64_MIN <= n <= INT64_MAX else raw
    if FLOAT_RE.match(raw):
        return float(raw)
    return raw


def _pairs(query_params: QueryParams):
    items = query_params.items() if hasattr(query_params, "items") else query_params
    seen = set()
    for key, value in items:
        # duplicate keys: first value wins
        if key in seen:
            continue
        seen.add(key)
        yield key, value


def _parse_count(name: str, raw: str) -> int:
    raw = (raw or "").strip()
    if not raw.isdigit() or not raw.isascii():
        raise BadRequest(f"{name} must be a non-negative integer, got {raw!r}")
    return int(raw)


def translate(query_params: QueryParams, unbounded_limit: str = "LIMIT -1") -> QueryFragment:
    filters = []
    params = []
    control = {}
    for key, value in _pairs(query_params):
        if key in CONTROL_KEYS:
            control[key] = value
            continue
        column = sanitize_identifier(key, "column")
        filters.append(f"{column} = ?")
        params.append(coerce_value(value))

    where = "WHERE " + " AND ".join(filters) if filters else ""

    order = ""
    direction = SORT_DIRECTIONS["asc"]
    if "order" in control:
        token = (control["order"] or "").strip().lower()
        if token not in SORT_DIRECTIONS:
            raise BadRequest("order must be asc or desc")
        direction = SORT_DIRECTIONS[token]
    if control.get("sort_by"):
        order = f"ORDER BY {sanitize_identifier(control['sort_by'], 'sort column')} {direction}"
    elif "sort_by" in control:
        raise BadRequest("sort_by must name a column")

    limit = ""
    count = _parse_count("limit", control["limit"]) if "limit" in control else None
    skip = _parse_count("offset", control["offset"]) if "offset" in control else None
    if count is not None:
        limit = f"LIMIT {count}"
    if skip is not None:
        # OFFSET needs a LIMIT in front of it
        limit = f"{limit or unbounded_limit} OFFSET {skip}"

    fragment = QueryFragment(where=where, order=order, limit=limit, params=tuple(params))
    LOG.debug("translated %d filter(s): %s %s %s", len(filters), where, order, limit)
    return fragment
