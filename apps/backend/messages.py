"""
Turn backend failures into short, actionable messages for patients.
Technical details stay in the logs.
"""
from .exceptions import (
    BackendAuthError,
    BackendError,
    BackendNotFoundError,
    BackendTimeoutError,
    BackendUnavailableError,
)

GENERIC_MESSAGE = 'Something went wrong. Please reload the page.'


def user_friendly_error(exc, fallback: str = GENERIC_MESSAGE) -> str:
    if not isinstance(exc, BackendError):
        return GENERIC_MESSAGE

    # No response at all: backend is down or the network dropped
    if isinstance(exc, BackendUnavailableError):
        return GENERIC_MESSAGE
    if isinstance(exc, BackendTimeoutError):
        return 'The clinic service is taking too long to respond. Please try again in a moment.'
    if isinstance(exc, BackendAuthError):
        return 'Your session has expired. Please log in again.'

    text = (exc.message or '').strip()
    lowered = text.lower()
    if 'invalid credentials' in lowered:
        return 'Invalid email/phone or password. Please try again.'
    if isinstance(exc, BackendNotFoundError) and not text:
        return fallback
    return text or fallback
