# This project was developed with assistance from AI tools.
"""Service-layer error taxonomy.

Every mutating service call either succeeds or raises exactly one of these.
Validation, authorization, not-found, and transition errors are raised before
any write; PersistenceError wraps store-level failures after a rollback.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to callers as a single readable message."""

    status_code: int = 500
    title: str = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """A required field is missing or a value is malformed."""

    status_code = 400
    title = "Bad Request"


class AuthorizationError(ServiceError):
    """The caller does not own the resource."""

    status_code = 403
    title = "Forbidden"


class AuthenticationRequiredError(AuthorizationError):
    """No authenticated caller is present."""

    status_code = 401
    title = "Unauthorized"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFoundError(ServiceError):
    """The Application or Snapshot does not exist."""

    status_code = 404
    title = "Not Found"


class InvalidTransitionError(ServiceError):
    """The requested status change (or edit) is not allowed from the current status."""

    status_code = 422
    title = "Unprocessable Entity"


class PersistenceError(ServiceError):
    """The store rejected or failed a write."""

    status_code = 500
    title = "Internal Server Error"


class ServiceUnavailableError(ServiceError):
    """The API could not be reached or timed out. Safe to retry."""

    status_code = 503
    title = "Service Unavailable"


ERRORS_BY_STATUS: dict[int, type[ServiceError]] = {
    400: ValidationError,
    401: AuthenticationRequiredError,
    403: AuthorizationError,
    404: NotFoundError,
    422: InvalidTransitionError,
    500: PersistenceError,
    503: ServiceUnavailableError,
}
