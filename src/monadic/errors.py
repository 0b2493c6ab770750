"""Custom errors for the monadic package."""


class EmptyErrorsError(ValueError):
    """Raised when an `Invalid` validation is constructed without any errors."""

    pass
