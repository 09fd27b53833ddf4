# config.py
# Defaults come from the environment; load_config() turns them into the
# GatewayConfig that create_app() receives.
import os
from dataclasses import dataclass
from typing import Mapping

from errors import BadRequest, ConfigError
from sql_validator import sanitize_identifier
from db.registry import DatabaseRegistry
from db.sqlite_client import SqliteBackend
from db.databricks_client import DatabricksBackend

VERSION = "2.0.0"

# Shared bearer secret
API_TOKEN = os.getenv("API_TOKEN", "")

# e.g. "DB_USERS=sqlite:///data/users.db,DB_METRICS=databricks://"
GATEWAY_DATABASES = os.getenv("GATEWAY_DATABASES", "")

# Databricks connection (used by databricks:// entries)
DATABRICKS_HOST = os.getenv("DATABRICKS_HOST", "")
DATABRICKS_HTTP_PATH = os.getenv("DATABRICKS_HTTP_PATH", "")
DATABRICKS_TOKEN = os.getenv("DATABRICKS_TOKEN", "")
QUERY_TIMEOUT = 120   # seconds

PRIMARY_KEY_COLUMN = "id"
RAW_QUERY_READ_ONLY = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
GATEWAY_HOST = os.getenv("GATEWAY_HOST", "0.0.0.0")
GATEWAY_PORT = int(os.getenv("GATEWAY_PORT", "8000"))

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GatewayConfig:
    api_token: str
    databases: DatabaseRegistry
    primary_key: str = PRIMARY_KEY_COLUMN
    raw_query_read_only: bool = RAW_QUERY_READ_ONLY


def parse_database_url(name: str, url: str, environ: Mapping[str, str]):
    """Build the backend handle for one GATEWAY_DATABASES entry."""
    if url.startswith("sqlite://"):
        path = url[len("sqlite://"):]
        # sqlite:///abs/path keeps its leading slash, sqlite://rel.db is relative
        if not path:
            raise ConfigError(f"database {name}: sqlite url needs a path")
        return SqliteBackend(path)
    if url.startswith("databricks://"):
        host = environ.get("DATABRICKS_HOST", DATABRICKS_HOST)
        http_path = environ.get("DATABRICKS_HTTP_PATH", DATABRICKS_HTTP_PATH)
        token = environ.get("DATABRICKS_TOKEN", DATABRICKS_TOKEN)
        if not (host and http_path and token):
            raise ConfigError(
                f"database {name}: DATABRICKS_HOST, DATABRICKS_HTTP_PATH and DATABRICKS_TOKEN are required"
            )
        timeout = int(environ.get("QUERY_TIMEOUT", QUERY_TIMEOUT))
        return DatabricksBackend(host, http_path, token, timeout=timeout)
    raise ConfigError(f"database {name}: unsupported url {url!r}")


def parse_databases(value: str, environ: Mapping[str, str]) -> DatabaseRegistry:
    entries = []
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, sep, url = chunk.partition("=")
        if not sep:
            raise ConfigError(f"malformed database entry {chunk!r}, expected NAME=URL")
        name = name.strip()
        entries.append((name, parse_database_url(name, url.strip(), environ)))
    try:
        return DatabaseRegistry(entries)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def load_config(environ: Mapping[str, str] = None) -> GatewayConfig:
    if environ is None:
        environ = os.environ
    token = environ.get("API_TOKEN", API_TOKEN)
    if not token:
        raise ConfigError("API_TOKEN must be set")
    databases = parse_databases(environ.get("GATEWAY_DATABASES", GATEWAY_DATABASES), environ)
    primary_key = environ.get("PRIMARY_KEY_COLUMN", PRIMARY_KEY_COLUMN)
    try:
        sanitize_identifier(primary_key)
    except BadRequest as e:
        raise ConfigError(f"PRIMARY_KEY_COLUMN: {e}") from e
    read_only = environ.get("RAW_QUERY_READ_ONLY")
    if read_only is None:
        read_only = RAW_QUERY_READ_ONLY
    else:
        read_only = read_only.strip().lower() in _TRUE
    return GatewayConfig(
        api_token=token,
        databases=databases,
        primary_key=primary_key,
        raw_query_read_only=read_only,
    )
