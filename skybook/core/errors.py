"""Service-layer failures.

Services raise these and never build HTTP responses themselves; the app-level
handlers in ``skybook.main`` turn them into the ``{success: false, error}``
envelope using ``status_code``.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Malformed input or a field-level business rule (duplicate flight number, bad price)."""

    status_code = 400


class ConflictError(ServiceError):
    """State transition refused: already cancelled, already paid, outside check-in window."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class UnauthorizedError(ServiceError):
    """Caller is neither the owner nor holds a privileged role."""

    status_code = 401


class AuthenticationError(UnauthorizedError):
    """Missing, invalid or expired bearer credential."""
