"""Error types raised by the TaskLine services.

Each error carries the HTTP status it maps to and a message that is safe to
show to the client. The API layer turns them into ``{"detail": message}``.
"""


class TaskLineError(Exception):
    """Base exception for service errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskLineError):
    """Malformed or missing input, or a mutation that would break an invariant."""

    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(TaskLineError):
    """No session, or the resource is not the caller's.

    Deliberately also used for resources that do not exist, so callers cannot
    probe for ids owned by other users.
    """

    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(TaskLineError):
    status_code = 404
    default_message = "Not found"


class InternalError(TaskLineError):
    status_code = 500
