# statement_builder.py
import logging
from typing import Any, Mapping, Optional

from errors import BadRequest
from models import QueryFragment, SqlStatement
from query_translator import coerce_value
from sql_validator import sanitize_identifier, sanitize_table

LOG = logging.getLogger(__name__)

LIST, GET, CREATE, UPDATE, DELETE = "LIST", "GET", "CREATE", "UPDATE", "DELETE"

SCALAR_TYPES = (str, int, float, bool, type(None))


def verb_for(method: str, record_id: Optional[str]) -> str:
    """Map an HTTP method (plus whether the path carries an id) to a statement verb."""
    method = method.upper()
    if method in ("GET", "HEAD"):
        return GET if record_id is not None else LIST
    if method == "POST":
        if record_id is not None:
            raise BadRequest("POST does not take a record id")
        return CREATE
    if method in ("PATCH", "PUT", "DELETE"):
        if record_id is None:
            raise BadRequest(f"{method} requires a record id")
        return UPDATE if method != "DELETE" else DELETE
    raise BadRequest(f"unsupported method {method}")


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def _columns(body: Optional[Mapping[str, Any]]):
    if not isinstance(body, Mapping):
        raise BadRequest("Request body must be a JSON object")
    if not body:
        raise BadRequest("Request body must not be empty")
    columns, values = [], []
    for key, value in body.items():
        columns.append(sanitize_identifier(key, "column"))
        if not isinstance(value, SCALAR_TYPES):
            raise BadRequest(f"value for {key} must be a scalar")
        values.append(value)
    return columns, values


def build(verb: str, table: str, record_id: Optional[Any] = None,
          fragment: Optional[QueryFragment] = None,
          body: Optional[Mapping[str, Any]] = None,
          primary_key: str = "id") -> SqlStatement:
    table = sanitize_table(table)
    pk = sanitize_identifier(primary_key, "primary key column")

    if verb in (GET, UPDATE, DELETE):
        if record_id is None or record_id == "":
            raise BadRequest(f"{verb} requires a record id")
        record_id = coerce_value(record_id)

    if verb == LIST:
        fragment = fragment or QueryFragment()
        stmt = SqlStatement(
            _join(f"SELECT * FROM {table}", fragment.where, fragment.order, fragment.limit),
            tuple(fragment.params),
        )
    elif verb == GET:
        stmt = SqlStatement(f"SELECT * FROM {table} WHERE {pk} = ?", (record_id,))
    elif verb == CREATE:
        columns, values = _columns(body)
        placeholders = ", ".join("?" for _ in columns)
        stmt = SqlStatement(
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
            tuple(values),
        )
    elif verb == UPDATE:
        columns, values = _columns(body)
        assignments = ", ".join(f"{c} = ?" for c in columns)
        stmt = SqlStatement(
            f"UPDATE {table} SET {assignments} WHERE {pk} = ?",
            tuple(values) + (record_id,),
        )
    elif verb == DELETE:
        stmt = SqlStatement(f"DELETE FROM {table} WHERE {pk} = ?", (record_id,))
    else:
        raise BadRequest(f"unknown statement verb {verb}")

    LOG.debug("%s %s -> %s [%d param(s)]", verb, table, stmt.sql, len(stmt.params))
    return stmt
