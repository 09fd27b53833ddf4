# rest.py
# CRUD handler behind /db/<db>/rest/<table>[/<id>]
#
#   GET    /db/DB_USERS/rest/users?age=25&sort_by=name&order=desc
#   GET    /db/DB_USERS/rest/users/123
#   POST   /db/DB_USERS/rest/users          {"name": "John", "age": 30}
#   PATCH  /db/DB_USERS/rest/users/123      {"age": 31}
#   DELETE /db/DB_USERS/rest/users/123

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import envelope
import statement_builder as sb
from db.base import Backend, execute_statement
from errors import BadRequest, GatewayError, NotFound
from query_translator import translate

LOG = logging.getLogger(__name__)


def split_path(path: str) -> Tuple[str, Optional[str]]:
    """'users/123' -> ('users', '123'); 'users' -> ('users', None)."""
    segments = [s for s in (path or "").split("/") if s]
    if not segments:
        raise BadRequest("Table name is required")
    if len(segments) > 2:
        raise BadRequest(f"invalid resource path: {path}")
    table = segments[0]
    record_id = segments[1] if len(segments) == 2 else None
    return table, record_id


def handle_rest(backend: Backend, method: str, path: str,
                query_params: Mapping[str, str], body: Any = None,
                primary_key: str = "id") -> Tuple[Dict[str, Any], int]:
    try:
        table, record_id = split_path(path)
        verb = sb.verb_for(method, record_id)
        fragment = (translate(query_params, unbounded_limit=backend.unbounded_limit)
                    if verb == sb.LIST else None)
        stmt = sb.build(verb, table, record_id=record_id, fragment=fragment,
                        body=body, primary_key=primary_key)
        result = execute_statement(backend, stmt.sql, stmt.params)

        if verb == sb.GET and not result.rows:
            raise NotFound(f"Record '{record_id}' not found in {table}")
        if verb in (sb.UPDATE, sb.DELETE) and result.meta.get("changes") == 0:
            raise NotFound(f"Record '{record_id}' not found in {table}")
    except GatewayError as e:
        if e.status_code >= 500:
            LOG.error("%s %s failed: %s", method, path, e.message)
        else:
            LOG.info("%s %s rejected (%d): %s", method, path, e.status_code, e.message)
        return envelope.failure(e.message), e.status_code

    return envelope.success(result), 201 if verb == sb.CREATE else 200
