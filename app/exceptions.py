"""Custom exceptions for MusicFinder.

Every error a route can raise maps to one HTTP status. The app factory
registers a handler that renders them as ``{"error": message, ...}``.
"""


class ApiError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None, payload: dict = None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        self.payload = payload or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        data = dict(self.payload)
        data['error'] = self.message
        return data


class ValidationError(ApiError):
    """Missing or malformed input."""
    status_code = 400


class AuthenticationError(ApiError):
    """No session, or credentials did not match."""
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    """Record absent, or not owned by the caller."""
    status_code = 404


class ConflictError(ApiError):
    """Uniqueness constraint would be violated."""
    status_code = 409


class UpstreamAuthError(ApiError):
    """The catalog identity endpoint refused or failed the token exchange."""

    status_code = 502

    def __init__(self, message: str = 'Failed to get Spotify access token',
                 upstream_status: int = None, details=None):
        self.upstream_status = upstream_status
        self.details = details
        payload = {'upstream_status': upstream_status}
        if details is not None:
            payload['details'] = details
        super().__init__(message, payload=payload)


class CatalogError(ApiError):
    """A catalog API call failed."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int = None, details=None):
        self.upstream_status = upstream_status
        self.details = details
        payload = {'upstream_status': upstream_status}
        if details is not None:
            payload['details'] = details
        super().__init__(message, payload=payload)

    def with_message(self, message: str) -> 'CatalogError':
        """Return a copy carrying an operation-specific message."""
        return CatalogError(message, upstream_status=self.upstream_status, details=self.details)
