"""
Custom exceptions for the booking flow.
Raised in steps.py / resume.py / pending.py and caught in views.py.
"""


class BookingFlowError(Exception):
    """Base exception for all booking flow errors."""
    pass


class UnknownStepError(BookingFlowError, ValueError):
    """Raised when a step identifier is not one of the four booking steps."""
    pass


class MalformedAppointmentError(BookingFlowError):
    """Raised when a pending appointment record from the backend cannot be used."""
    pass


class AppointmentNotFoundError(BookingFlowError):
    """Raised when the requested pending appointment is not in the patient's list."""
    pass
