"""Exceptions raised by the backend service layer."""


class ServiceError(Exception):
    """Base exception for backend service errors."""

    pass


class AuthError(ServiceError):
    """Raised when the caller is not authenticated."""

    pass


class FetchError(ServiceError):
    """Raised when reading or writing table data fails."""

    pass


class NotFoundError(FetchError):
    """Raised when a requested row does not exist."""

    pass


class UploadError(ServiceError):
    """Raised when a media upload is rejected or fails."""

    pass


class ParseError(ServiceError):
    """Raised when a response row does not have the expected shape."""

    pass
