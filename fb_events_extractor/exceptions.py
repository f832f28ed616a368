"""Custom exceptions for the fb-events-extractor library."""


class EventSearchError(Exception):
    """Base exception for all fb-events-extractor errors.

    Every error carries a numeric ``code`` so callers can tell validation
    failures apart from failures during the search itself.
    """

    code = -1

    def __init__(self, message: str, code: int = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code}


class MissingCoordinatesError(EventSearchError):
    """Raised when latitude or longitude is not given."""
    code = 1


class MissingAccessTokenError(EventSearchError):
    """Raised when no access token can be resolved."""
    code = 2


class SearchError(EventSearchError):
    """Raised when any stage of a running search fails.

    The underlying exception is kept in ``cause`` (and ``__cause__``).
    """
    code = -1

    def __init__(self, cause: BaseException):
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class PayloadError(EventSearchError):
    """Raised when an upstream response does not have the expected shape."""
    pass


class GraphAPIError(EventSearchError):
    """Raised when the Graph API answers with an error payload."""

    def __init__(self, message: str, error_type: str = None, api_code: int = None):
        super().__init__(message)
        self.error_type = error_type
        self.api_code = api_code


class FetchError(EventSearchError):
    """Raised when a request cannot be completed (transport or HTTP status)."""
    pass
