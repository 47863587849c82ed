"""Mapping of identification errors onto HTTP responses."""

from fastapi import HTTPException

from snaptheplant.core.errors import (
    AnalysisError,
    AuthenticationRequiredError,
    IdentificationError,
    InputError,
    NotFoundError,
    QuotaExceededError,
    SessionStateError,
)

STATUS_CODES = {
    InputError: 400,
    AuthenticationRequiredError: 401,
    NotFoundError: 404,
    SessionStateError: 409,
    QuotaExceededError: 429,
    AnalysisError: 502,
}


def status_code_for(error: IdentificationError) -> int:
    for error_class, status_code in STATUS_CODES.items():
        if isinstance(error, error_class):
            return status_code
    return 500


def to_http_exception(error: IdentificationError) -> HTTPException:
    """
    Convert an identification error into an HTTPException.

    Analysis failures carry only the generic retry message; the underlying
    cause is logged where it happened.
    """
    if isinstance(error, (AnalysisError, QuotaExceededError)):
        message = error.user_message
    else:
        message = str(error)
    return HTTPException(
        status_code=status_code_for(error),
        detail={"error": error.error_type, "message": message},
    )
