# app/utils/errors.py


class ApiError(Exception):
    """Base class for errors that map onto a caller-facing status category."""

    status_code = "INTERNAL_SERVER_ERROR"
    default_message = "An unexpected error occurred. Please try again later."

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class AuthenticationError(ApiError):
    """Bad credentials, or a bad / expired bearer token."""
    status_code = "FORBIDDEN"
    default_message = "bad token"


class AuthorizationError(ApiError, PermissionError):
    """Role or ownership denied."""
    status_code = "FORBIDDEN"
    default_message = "forbidden"


class NotFoundError(ApiError):
    status_code = "NOT_FOUND"
    default_message = "The requested resource could not be found."


class CapacityError(ApiError):
    status_code = "FORBIDDEN"
    default_message = "no room left for gallery images"


class UploadRejected(ApiError):
    status_code = "BAD_REQUEST"
    default_message = "invalid upload"


class StoreFailure(ApiError):
    """
    I/O failure in the resource store or the asset store.

    `detail` is kept for logging only; it is never sent to the caller.
    """
    status_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, store, detail=None):
        self.store = store
        self.detail = detail
        super().__init__(f"{store} failure")


class PartialLifecycleFailure(ApiError):
    """A lifecycle protocol aborted after at least one committed step."""
    status_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, operation, failed_step, last_succeeded_step, cause=None):
        self.operation = operation
        self.failed_step = failed_step
        self.last_succeeded_step = last_succeeded_step
        self.cause = cause
        super().__init__(
            f"{operation} partially committed: step '{failed_step}' failed "
            f"after '{last_succeeded_step}'",
            errors={
                "operation": operation,
                "failed_step": failed_step,
                "last_succeeded_step": last_succeeded_step,
            },
        )
