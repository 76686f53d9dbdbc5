"""
Exceptions for calls to the clinic REST backend.
Raised in client.py and caught in services/views, where they are turned
into user-facing messages (see messages.py).
"""


class BackendError(Exception):
    """Base exception for all backend call failures."""

    def __init__(self, message='', status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot be reached at all (DNS, refused, reset)."""
    pass


class BackendTimeoutError(BackendError):
    """Raised on read/connect timeouts and HTTP 503 — the request may still complete."""
    pass


class BackendResponseError(BackendError):
    """Raised when the backend answers with a non-2xx status or a non-JSON body."""
    pass


class BackendNotFoundError(BackendResponseError):
    """Raised on HTTP 404."""
    pass


class BackendAuthError(BackendResponseError):
    """Raised on HTTP 401/403 — the session token is missing or no longer valid."""
    pass
