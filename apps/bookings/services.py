"""
Server-side progress for the booking flow.

After each step validates, the form so far is posted to the backend, which
creates (first step) or updates the pending appointment and records the
next step as its bookingProgress. The returned appointment id is merged back
into the form so later steps and payment refer to the same record.
"""
import logging

from apps.backend.casing import camelize
from apps.backend.exceptions import BackendResponseError

from .store import BookingFormStore

logger = logging.getLogger(__name__)


def build_progress_payload(form: dict, progress: str) -> dict:
    data = {k: v for k, v in form.items() if v is not None and k != 'booking_progress'}
    payload = camelize(data)
    payload['bookingProgress'] = str(progress)
    return payload


def _appointment_id(response: dict):
    appointment = response.get('appointment') or {}
    return response.get('appointmentId') or appointment.get('id')


def sync_booking_progress(client, store: BookingFormStore, progress) -> str:
    """
    Push the current form to the backend and record the new progress marker.
    BackendError propagates; the store is only updated on success.
    """
    payload = build_progress_payload(store.get_form(), progress)
    response = client.save_booking_progress(payload)
    appointment_id = _appointment_id(response)
    if not appointment_id:
        raise BackendResponseError('Booking could not be saved. Please try again.', payload=response)

    store.set_form({
        'appointment_id': str(appointment_id),
        'booking_progress': str(progress),
    })
    logger.info('Appointment %s progress saved as %s', appointment_id, progress)
    return str(appointment_id)
