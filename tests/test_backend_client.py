import httpx
import pytest

from apps.backend.casing import camelize, snakeify, to_camel, to_snake
from apps.backend.exceptions import (
    BackendAuthError,
    BackendError,
    BackendNotFoundError,
    BackendResponseError,
    BackendTimeoutError,
    BackendUnavailableError,
)
from apps.backend.messages import GENERIC_MESSAGE, user_friendly_error


def test_bearer_token_is_sent(backend, api):
    backend.add('GET', 'appointments/my', {'appointments': []})
    api.list_my_appointments()
    assert backend.requests[0].headers['Authorization'] == 'Bearer test-token'


def test_no_token_no_authorization_header(backend):
    backend.add('GET', 'appointments/my', {'appointments': []})
    with backend.client(token=None) as api:
        api.list_my_appointments()
    assert 'Authorization' not in backend.requests[0].headers


@pytest.mark.parametrize('status, error', [
    (401, BackendAuthError),
    (403, BackendAuthError),
    (404, BackendNotFoundError),
    (409, BackendResponseError),
    (500, BackendResponseError),
    (503, BackendTimeoutError),
])
def test_status_codes_map_to_exceptions(backend, api, status, error):
    backend.add('GET', 'appointments/my', {'message': 'nope'}, status=status)
    with pytest.raises(error) as excinfo:
        api.list_my_appointments()
    assert excinfo.value.message == 'nope'
    assert excinfo.value.status_code == status


def test_timeout_maps_to_timeout_error(backend, api):
    backend.add('GET', 'appointments/my', exc=httpx.ReadTimeout)
    with pytest.raises(BackendTimeoutError):
        api.list_my_appointments()


def test_connect_failure_maps_to_unavailable(backend, api):
    backend.add('GET', 'appointments/my', exc=httpx.ConnectError)
    with pytest.raises(BackendUnavailableError):
        api.list_my_appointments()


def test_success_false_body_raises(backend, api):
    backend.add('POST', 'appointments', {'success': False, 'error': 'Slot taken'})
    with pytest.raises(BackendResponseError, match='Slot taken'):
        api.save_booking_progress({'slotId': 's-1'})


def test_login_posts_identifier_and_password(backend, api):
    backend.add('POST', 'auth/login', {'accessToken': 't', 'user': {'id': 'u1'}})
    payload = api.login('asha@example.com', 'secret')
    assert payload['accessToken'] == 't'
    assert backend.last_json('POST', 'auth/login') == {'identifier': 'asha@example.com', 'password': 'secret'}


def test_existing_order_missing_raises_not_found(backend, api):
    backend.add('GET', 'payment/existing-order/apt-1', {'success': True})
    with pytest.raises(BackendNotFoundError):
        api.get_existing_order('apt-1')


def test_list_slots_sends_date_and_mode(backend, api):
    backend.add('GET', 'slots', {'slots': [{'id': 's-1'}]})
    assert api.list_slots('2026-10-19', 'ONLINE') == [{'id': 's-1'}]
    params = backend.calls('GET', 'slots')[0].url.params
    assert params['date'] == '2026-10-19'
    assert params['mode'] == 'ONLINE'


def test_get_invoice_url(backend, api):
    backend.add('GET', 'invoice/INV-1', {'success': True, 'url': 'https://files.test/INV-1.pdf'})
    assert api.get_invoice_url('INV-1') == 'https://files.test/INV-1.pdf'


def test_casing_helpers():
    assert to_camel('appointment_mode') == 'appointmentMode'
    assert to_camel('dob') == 'dob'
    assert to_snake('bookingProgress') == 'booking_progress'
    assert camelize({'full_name': 'A', 'chest_female': '1'}) == {'fullName': 'A', 'chestFemale': '1'}
    assert snakeify({'planName': 'X', 'slot': {'startAt': 'y'}}) == {'plan_name': 'X', 'slot': {'startAt': 'y'}}


@pytest.mark.parametrize('exc, expected', [
    (BackendUnavailableError('down'), GENERIC_MESSAGE),
    (BackendAuthError('expired'), 'Your session has expired. Please log in again.'),
    (BackendResponseError('Invalid credentials'), 'Invalid email/phone or password. Please try again.'),
    (BackendResponseError('Slot taken'), 'Slot taken'),
    (BackendResponseError(''), 'fallback'),
    (ValueError('internal'), GENERIC_MESSAGE),
])
def test_user_friendly_error(exc, expected):
    assert user_friendly_error(exc, 'fallback') == expected


def test_timeout_message_mentions_waiting():
    assert 'too long' in user_friendly_error(BackendTimeoutError('slow'))


def test_backend_error_defaults():
    exc = BackendError('x')
    assert exc.payload == {}
    assert exc.status_code is None
