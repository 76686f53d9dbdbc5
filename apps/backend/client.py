"""
HTTP client for the clinic REST backend.

Every appointment, patient, order and invoice lives behind this API; the
front-end never owns that data. One client is built per request from the
session's access token and closed when the view is done with it:

    with get_api_client(request) as api:
        api.list_pending_appointments()

All failures surface as exceptions from apps.backend.exceptions.
"""
import logging

import httpx
from django.conf import settings

from .exceptions import (
    BackendAuthError,
    BackendNotFoundError,
    BackendResponseError,
    BackendTimeoutError,
    BackendUnavailableError,
)

logger = logging.getLogger(__name__)

API_TOKEN_SESSION_KEY = 'api_access_token'
PATIENT_SESSION_KEY = 'api_patient_id'


class ClinicApiClient:
    def __init__(self, base_url, token=None, timeout=30.0, transport=None):
        headers = {'Accept': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'
        self._http = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        self._http.close()

    # ── Low-level ─────────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, *, params=None, json=None) -> dict:
        try:
            response = self._http.request(method, path, params=params, json=json)
        except httpx.TimeoutException as exc:
            logger.warning('Backend timeout: %s %s', method, path)
            raise BackendTimeoutError('The clinic service took too long to respond.') from exc
        except httpx.TransportError as exc:
            logger.warning('Backend unreachable: %s %s (%s)', method, path, exc)
            raise BackendUnavailableError('The clinic service is unreachable.') from exc

        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {'data': payload}

        status = response.status_code
        if status < 400:
            return payload

        message = payload.get('message') or payload.get('error') or f'Request failed with status {status}'
        if status == 503:
            raise BackendTimeoutError(message, status_code=status, payload=payload)
        if status in (401, 403):
            raise BackendAuthError(message, status_code=status, payload=payload)
        if status == 404:
            raise BackendNotFoundError(message, status_code=status, payload=payload)

        if status >= 500:
            logger.error('Backend server error %s on %s %s: %s', status, method, path, message)
        raise BackendResponseError(message, status_code=status, payload=payload)

    @staticmethod
    def _expect_success(payload: dict, default_message: str) -> dict:
        """Some endpoints answer 200 with {"success": false, "error": ...}."""
        if payload.get('success') is False:
            raise BackendResponseError(
                payload.get('error') or payload.get('message') or default_message,
                payload=payload,
            )
        return payload

    # ── Auth ──────────────────────────────────────────────────────────────────

    def login(self, identifier: str, password: str) -> dict:
        return self._request('POST', 'auth/login', json={
            'identifier': identifier,
            'password': password,
        })

    def logout(self) -> None:
        self._request('POST', 'auth/logout')

    # ── Appointments ──────────────────────────────────────────────────────────

    def list_pending_appointments(self, patient_id=None) -> list:
        params = {'patientId': patient_id} if patient_id else None
        payload = self._request('GET', 'appointments/pending', params=params)
        return payload.get('appointments') or []

    def delete_pending_appointment(self, appointment_id: str) -> None:
        payload = self._request('DELETE', f'appointments/pending/{appointment_id}')
        self._expect_success(payload, 'Failed to delete appointment')

    def save_booking_progress(self, data: dict) -> dict:
        """Create or update the in-flight appointment; the backend advances bookingProgress."""
        payload = self._request('POST', 'appointments', json=data)
        return self._expect_success(payload, 'Failed to save booking progress')

    def list_my_appointments(self) -> list:
        payload = self._request('GET', 'appointments/my')
        return payload.get('appointments') or []

    def get_appointment(self, appointment_id: str) -> dict:
        payload = self._request('GET', f'appointments/{appointment_id}')
        return payload.get('appointment') or payload

    def list_admin_appointments(self, status=None, mode=None, date_iso=None) -> dict:
        """All patients' appointments (ADMIN token). Returns {'appointments': [...], 'total': n}."""
        params = {}
        if status:
            params['status'] = status
        if mode:
            params['mode'] = mode
        if date_iso:
            params['date'] = date_iso
        payload = self._request('GET', 'admin/appointments', params=params or None)
        return {
            'appointments': payload.get('appointments') or [],
            'total': payload.get('total') or 0,
        }

    def list_slots(self, date_iso: str, mode: str) -> list:
        payload = self._request('GET', 'slots', params={'date': date_iso, 'mode': mode})
        return payload.get('slots') or []

    # ── Payments ──────────────────────────────────────────────────────────────

    def create_order(self, appointment_id: str) -> dict:
        payload = self._request('POST', 'payment/order', json={'appointmentId': appointment_id})
        self._expect_success(payload, 'Failed to create payment order')
        if not payload.get('order'):
            raise BackendResponseError('Failed to create payment order', payload=payload)
        return payload['order']

    def get_existing_order(self, appointment_id: str) -> dict:
        payload = self._request('GET', f'payment/existing-order/{appointment_id}')
        self._expect_success(payload, 'No existing order found')
        if not payload.get('order'):
            raise BackendNotFoundError('No existing order found', payload=payload)
        return payload['order']

    def verify_payment(self, order_id: str, payment_id: str, signature: str) -> dict:
        payload = self._request('POST', 'payment/verify', json={
            'orderId': order_id,
            'paymentId': payment_id,
            'signature': signature,
        })
        return self._expect_success(payload, 'Payment verification failed')

    # ── Invoices ──────────────────────────────────────────────────────────────

    def get_invoice_for_appointment(self, appointment_id: str) -> dict:
        payload = self._request('GET', f'invoice/appointment/{appointment_id}')
        self._expect_success(payload, 'Failed to fetch invoice')
        if not payload.get('invoice'):
            raise BackendNotFoundError('Invoice not found', payload=payload)
        return payload['invoice']

    def get_invoice_url(self, invoice_number: str) -> str:
        payload = self._request('GET', f'invoice/{invoice_number}')
        if not payload.get('success') or not payload.get('url'):
            raise BackendNotFoundError('Invoice URL not found', payload=payload)
        return payload['url']


def get_api_client(request) -> ClinicApiClient:
    """Build a client authenticated with the token stored at login."""
    return ClinicApiClient(
        base_url=settings.CLINIC_API_URL,
        token=request.session.get(API_TOKEN_SESSION_KEY),
        timeout=settings.CLINIC_API_TIMEOUT,
    )
