# main.py
import hmac
import logging

from flask import Flask, request, jsonify, current_app
from werkzeug.exceptions import HTTPException

import config
import envelope
from db.base import execute_statement
from db.registry import resolve_database
from errors import BadRequest, DatabaseNotFound, Forbidden, GatewayError, Unauthorized
from rest import handle_rest
from sql_validator import is_safe_sql

LOG = logging.getLogger(__name__)

REST_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def bearer_token(header: str) -> str:
    # "Bearer <token>"; a bare header value is taken as the token itself
    if header.startswith("Bearer "):
        return header[len("Bearer "):]
    return header


def check_auth(header, secret: str) -> None:
    if not header or not secret:
        raise Unauthorized()
    if not hmac.compare_digest(bearer_token(header).encode(), secret.encode()):
        raise Unauthorized()


def _gateway() -> config.GatewayConfig:
    return current_app.config["GATEWAY"]


def _json_body(required: bool):
    if not request.get_data(cache=True):
        if required:
            raise BadRequest("Request body must be JSON")
        return None
    body = request.get_json(force=True, silent=True)
    if body is None:
        raise BadRequest("Request body must be valid JSON")
    return body


def create_app(gateway_config: config.GatewayConfig) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.config["GATEWAY"] = gateway_config
    app.json.sort_keys = False

    @app.before_request
    def require_token():
        try:
            check_auth(request.headers.get("Authorization"), _gateway().api_token)
        except Unauthorized as e:
            LOG.info("unauthorized %s %s from %s", request.method, request.path, request.remote_addr)
            return jsonify(envelope.error(e.message)), e.status_code
        return None

    @app.errorhandler(DatabaseNotFound)
    def database_not_found(e):
        LOG.info("unknown database %r", e.name)
        return jsonify(envelope.database_not_found(e.name, e.available)), e.status_code

    @app.errorhandler(GatewayError)
    def gateway_error(e):
        if e.status_code >= 500:
            LOG.error("%s %s failed: %s", request.method, request.path, e.message)
        return jsonify(envelope.error(e.message)), e.status_code

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify(envelope.error(e.description or e.name)), e.code

    @app.route("/")
    def home():
        return jsonify({
            "name": "sql-rest-gateway",
            "version": config.VERSION,
            "endpoints": {
                "list_databases": "GET /databases",
                "rest_api": "/db/{dbName}/rest/{table}[/{id}]",
                "raw_query": "POST /db/{dbName}/query",
            },
        })

    @app.route("/databases")
    def list_databases():
        return jsonify({"success": True, "databases": _gateway().databases.names()})

    @app.route("/db/<db_name>/rest", defaults={"resource": ""}, methods=REST_METHODS)
    @app.route("/db/<db_name>/rest/", defaults={"resource": ""}, methods=REST_METHODS)
    @app.route("/db/<db_name>/rest/<path:resource>", methods=REST_METHODS)
    def rest(db_name, resource):
        gw = _gateway()
        backend = resolve_database(db_name, gw.databases)
        try:
            body = _json_body(required=False) if request.method in ("POST", "PUT", "PATCH") else None
        except BadRequest as e:
            return jsonify(envelope.failure(e.message)), e.status_code
        payload, status = handle_rest(backend, request.method, resource,
                                      request.args.items(multi=True), body,
                                      primary_key=gw.primary_key)
        return jsonify(payload), status

    @app.route("/db/<db_name>/query", methods=["POST"])
    def raw_query(db_name):
        # caller-supplied SQL runs verbatim; only the bearer token gates it
        gw = _gateway()
        backend = resolve_database(db_name, gw.databases)
        body = _json_body(required=True)
        if not isinstance(body, dict):
            raise BadRequest("Request body must be a JSON object")
        query = body.get("query")
        params = body.get("params") or []
        if not query or not isinstance(query, str):
            raise BadRequest("Query is required")
        if not isinstance(params, list):
            raise BadRequest("params must be an array")
        if gw.raw_query_read_only:
            ok, msg = is_safe_sql(query)
            if not ok:
                raise Forbidden(msg)
        LOG.debug("raw query on %s [%d param(s)]", db_name, len(params))
        result = execute_statement(backend, query, params)
        return jsonify(envelope.success(result))

    return app


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    app = create_app(config.load_config())
    print("Registered routes:")
    for r in sorted([rule.rule for rule in app.url_map.iter_rules()]):
        print(" ", r)
    print("Databases:", ", ".join(app.config["GATEWAY"].databases.names()) or "(none)")
    app.run(host=config.GATEWAY_HOST, port=config.GATEWAY_PORT)
