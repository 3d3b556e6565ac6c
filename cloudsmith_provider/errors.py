"""Error types raised by the API client and resource adapters."""


class CloudsmithError(Exception):
    """Base class for all provider errors."""


class ConfigError(CloudsmithError, ValueError):
    """Raised when provider configuration is missing or invalid."""


class TransportError(CloudsmithError):
    """Raised when the API could not be reached (DNS, connection, timeout)."""


class ApiError(CloudsmithError):
    """Raised when the API answers with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str = "", body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"Cloudsmith API returned HTTP {status_code}")


class NotFoundError(ApiError):
    """HTTP 404. Read operations treat this as "resource absent"."""

    def __init__(self, message: str = "", body: str = ""):
        super().__init__(404, message or "Resource not found (HTTP 404)", body)


class UnprocessableError(ApiError):
    """HTTP 422. A semantic validation failure on the server; never retried."""

    def __init__(self, message: str = "", body: str = ""):
        super().__init__(422, message or "Request could not be processed (HTTP 422)", body)


class WaitTimeoutError(CloudsmithError):
    """Raised when a bounded wait exceeds its deadline."""

    def __init__(self, resource_id: str, operation: str, timeout_s: float):
        self.resource_id = resource_id
        self.operation = operation
        self.timeout_s = timeout_s
        super().__init__(
            f"timed out after {timeout_s:g}s waiting for {resource_id or '<unknown>'} "
            f"to be {operation}"
        )


class ImportFormatError(CloudsmithError, ValueError):
    """Raised when an import ID does not match the resource's ID format."""


class SchemaValidationError(CloudsmithError, ValueError):
    """Raised when declared configuration does not satisfy a resource schema."""

    def __init__(self, resource: str, problems: list[str]):
        self.resource = resource
        self.problems = problems
        super().__init__(f"{resource}: " + "; ".join(problems))
