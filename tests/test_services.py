import pytest

from apps.backend.exceptions import BackendResponseError
from apps.bookings.services import build_progress_payload, sync_booking_progress
from apps.bookings.steps import BookingStep
from apps.bookings.store import SESSION_KEY, BookingFormStore


def test_payload_is_camelcase_without_nulls():
    payload = build_progress_payload(
        {'full_name': 'Asha', 'email': None, 'booking_progress': 'USER_DETAILS', 'plan_slug': 'weight-loss'},
        BookingStep.RECALL,
    )
    assert payload == {'fullName': 'Asha', 'planSlug': 'weight-loss', 'bookingProgress': 'RECALL'}


def test_sync_merges_returned_id(backend, api):
    backend.add('POST', 'appointments', {'success': True, 'appointmentId': 42})
    store = BookingFormStore({SESSION_KEY: {'full_name': 'Asha'}})

    assert sync_booking_progress(api, store, BookingStep.RECALL) == '42'
    assert store.get('appointment_id') == '42'
    assert store.get('booking_progress') == 'RECALL'


def test_sync_without_id_leaves_store_alone(backend, api):
    backend.add('POST', 'appointments', {'success': True})
    store = BookingFormStore({SESSION_KEY: {'full_name': 'Asha'}})

    with pytest.raises(BackendResponseError):
        sync_booking_progress(api, store, BookingStep.RECALL)
    assert store.get_form() == {'full_name': 'Asha'}
