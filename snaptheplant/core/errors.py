"""
Error taxonomy for the identification flow.

Routers convert these into HTTP responses; nothing below the API layer
should surface a raw stack trace to the user.
"""


class IdentificationError(Exception):
    """Base class for all expected identification failures."""

    error_type = "identification_error"
    user_message = "Something went wrong. Please try again."

    def __init__(self, message: str = ""):
        super().__init__(message or self.user_message)


class InputError(IdentificationError, ValueError):
    """Missing or invalid user input (no image, no category, bad answers)."""

    error_type = "invalid_input"
    user_message = "Please select a category and provide a photo."


class QuotaExceededError(IdentificationError):
    """The daily identification budget has been used up."""

    error_type = "daily_limit_reached"
    user_message = (
        "You have used all your free identifications for today. "
        "Please try again tomorrow."
    )


class AnalysisError(IdentificationError):
    """The external vision analysis failed, timed out or returned garbage."""

    error_type = "analysis_failed"
    user_message = "There was an error analyzing the image. Please try again."


class SessionStateError(IdentificationError):
    """An operation was attempted in a session state that does not allow it."""

    error_type = "invalid_session_state"


class NotFoundError(IdentificationError):
    """A species, session or collection item does not exist."""

    error_type = "not_found"
    user_message = "The requested item was not found."


class AuthenticationRequiredError(IdentificationError):
    """The operation needs a signed-in user."""

    error_type = "authentication_required"
    user_message = "Please sign in to identify photos and keep a collection."
