# errors.py
# Error kinds raised by the translator, resolver and backends.
# main.py turns every GatewayError into a JSON response with its status code.


class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(GatewayError, ValueError):
    status_code = 400


class Unauthorized(GatewayError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(GatewayError):
    status_code = 403


class NotFound(GatewayError):
    status_code = 404


class DatabaseNotFound(NotFound):
    """Unknown database name; carries every configured name for the client."""

    def __init__(self, name: str, available):
        super().__init__(f"Database '{name}' not found")
        self.name = name
        self.available = list(available)


class BackendExecutionError(GatewayError):
    status_code = 500


class ConfigError(Exception):
    """Raised at startup when the environment cannot produce a valid config."""
