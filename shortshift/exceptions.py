"""Custom exceptions for ShortShift.

This module defines the error taxonomy used across the upload pipeline, from
checks run in the intake form to failures reported by YouTube.
"""


class ShortShiftError(Exception):
    """Base exception for all ShortShift errors.

    All custom exceptions in this application inherit from this class so that
    application-specific errors can be caught with a single except clause.
    """

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class LocalValidationError(ShortShiftError):
    """Raised by the intake form before any network call is made.

    The message is shown inline to the user and the form is left untouched.
    """

    status_code = 400


class RequestValidationError(ShortShiftError):
    """Raised when the server rejects the submitted upload fields.

    Attributes:
        errors: Individual rule violations, in the order they were found
    """

    status_code = 400

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = errors
        super().__init__(" ".join(errors))


class AuthError(ShortShiftError):
    """Raised when an access token cannot be obtained.

    Covers missing configuration as well as expired or revoked refresh
    tokens and network failures while talking to the token endpoint.
    """


class ProviderError(ShortShiftError):
    """Raised when YouTube rejects or interrupts an upload.

    Attributes:
        reason: Provider error reason (e.g. ``quotaExceeded``) when known
        provider_status: HTTP status returned by the provider when known
    """

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        provider_status: int | None = None,
    ):
        self.reason = reason
        self.provider_status = provider_status
        super().__init__(message)
