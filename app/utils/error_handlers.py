from flask_limiter.errors import RateLimitExceeded

from ..constants.service_code import ERROR_MESSAGES
from .errors import StoreFailure, PartialLifecycleFailure
from .json_response import prepared_response
from .logger import Log


# Handle marshmallow ValidationError
def handle_validation_error(error):
    return prepared_response(
        status=False,
        status_code="BAD_REQUEST",
        message=ERROR_MESSAGES["VALIDATION_FAILED"],
        errors=error.messages,
    )

# Handle AuthenticationError / AuthorizationError / NotFoundError / CapacityError / UploadRejected
def handle_api_error(error):
    return prepared_response(
        status=False,
        status_code=error.status_code,
        message=error.message,
        errors=error.errors,
    )

# Handle StoreFailure: the underlying detail is logged, never returned
def handle_store_failure(error: StoreFailure):
    Log.error(f"[error_handlers.py][handle_store_failure] {error.store}: {error.detail}")
    return prepared_response(
        status=False,
        status_code="INTERNAL_SERVER_ERROR",
        message=ERROR_MESSAGES["SERVER_ERROR"],
    )

# Handle PartialLifecycleFailure
def handle_partial_lifecycle_failure(error: PartialLifecycleFailure):
    Log.error(
        f"[error_handlers.py][handle_partial_lifecycle_failure] {error.message}; cause: {error.cause!r}"
    )
    return prepared_response(
        status=False,
        status_code="INTERNAL_SERVER_ERROR",
        message=error.message,
        errors=error.errors,
    )

def handle_rate_limit(e: RateLimitExceeded):
    return prepared_response(
        status=False,
        status_code="TOO_MANY_REQUESTS",
        message=e.description or "Too many requests, please try again later.",
    )
