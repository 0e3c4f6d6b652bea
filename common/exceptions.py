"""Domain error taxonomy shared by services.

Services raise these; API views translate them into HTTP responses with
`api_error_response`. Nothing in the service layer retries on them.
"""

from rest_framework import status
from rest_framework.response import Response


class DomainError(Exception):
    """Base class for business-rule failures raised by services."""

    code = "error"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class NotFound(DomainError):
    """A referenced entity does not exist."""

    code = "not_found"
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, message: str = ""):
        super().__init__(message or f"{entity} not found")
        self.entity = entity


class InvalidOperation(DomainError):
    """Entities are valid but their state forbids the operation (e.g. empty cart)."""

    code = "invalid_operation"


class InvalidArgument(DomainError):
    """Caller supplied bad input (e.g. an unknown discount code)."""

    code = "invalid_argument"


class InvalidState(DomainError):
    """Persisted data is internally inconsistent (e.g. a variant without a price)."""

    code = "invalid_state"
    http_status = status.HTTP_409_CONFLICT


def api_error_response(exc: DomainError) -> Response:
    return Response({"detail": exc.message, "code": exc.code}, status=exc.http_status)
