"""
Patient profile pages.

    /profile/appointments/                my confirmed and past appointments
    /profile/appointments/<id>/           one appointment + invoice
    /profile/pending/                     pending (unfinished) appointments
    /profile/pending/<id>/resume/         POST: continue a pending booking
    /profile/pending/<id>/delete/         POST: delete a pending booking
"""
import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from apps.accounts.decorators import patient_login_required
from apps.backend.casing import snakeify
from apps.backend.client import PATIENT_SESSION_KEY, get_api_client
from apps.backend.exceptions import BackendError, BackendNotFoundError
from apps.backend.messages import user_friendly_error
from apps.bookings.exceptions import AppointmentNotFoundError
from apps.bookings.pending import (
    FetchStatus,
    PendingFetchResult,
    delete_pending_appointment,
    fetch_pending_appointments,
    find_appointment,
)
from apps.bookings.resume import ResumeReconciler
from apps.bookings.store import BookingFormStore
from apps.payments.invoices import get_invoice_for_appointment

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# My appointments
# ─────────────────────────────────────────────────────────────────────────────

@patient_login_required
def appointment_list(request):
    appointments = []
    error = None
    try:
        with get_api_client(request) as api:
            appointments = [snakeify(record) for record in api.list_my_appointments()]
    except BackendError as exc:
        logger.exception('Failed to load appointments')
        error = user_friendly_error(exc, 'Failed to load your appointments')

    return render(request, 'patients/appointments.html', {
        'appointments': appointments,
        'error': error,
    })


@patient_login_required
def appointment_detail(request, appointment_id):
    try:
        with get_api_client(request) as api:
            appointment = snakeify(api.get_appointment(appointment_id))
            invoice = get_invoice_for_appointment(api, appointment_id)
    except BackendNotFoundError:
        raise Http404('Appointment not found')
    except BackendError as exc:
        logger.exception('Failed to load appointment %s', appointment_id)
        messages.error(request, user_friendly_error(exc, 'Failed to load the appointment'))
        return redirect('patients:appointment_list')

    return render(request, 'patients/appointment_detail.html', {
        'appointment': appointment,
        'invoice': invoice,
    })


# ─────────────────────────────────────────────────────────────────────────────
# Pending appointments
# ─────────────────────────────────────────────────────────────────────────────

def _render_pending(request, result):
    return render(request, 'patients/pending_appointments.html', {
        'result': result,
        'appointments': result.appointments,
        'is_empty': result.status == FetchStatus.EMPTY,
    })


@patient_login_required
def pending_list(request):
    with get_api_client(request) as api:
        result = fetch_pending_appointments(api, patient_id=request.session.get(PATIENT_SESSION_KEY))
    return _render_pending(request, result)


@require_POST
@patient_login_required
def pending_resume(request, appointment_id):
    with get_api_client(request) as api:
        result = fetch_pending_appointments(api, patient_id=request.session.get(PATIENT_SESSION_KEY))

    if result.failed:
        messages.error(request, result.error)
        return redirect('patients:pending_list')

    try:
        appointment = find_appointment(result.appointments, appointment_id)
    except AppointmentNotFoundError:
        logger.warning('Resume requested for unknown pending appointment %s', appointment_id)
        messages.error(request, 'That appointment is no longer pending.')
        return redirect('patients:pending_list')

    return ResumeReconciler(BookingFormStore.for_request(request)).resume(appointment)


@require_POST
@patient_login_required
def pending_delete(request, appointment_id):
    with get_api_client(request) as api:
        result = fetch_pending_appointments(api, patient_id=request.session.get(PATIENT_SESSION_KEY))
        if result.failed:
            messages.error(request, result.error)
            return _render_pending(request, result)
        outcome = delete_pending_appointment(api, result.appointments, appointment_id)

    if outcome.deleted:
        store = BookingFormStore.for_request(request)
        # The in-flight form pointed at the deleted record
        if store.get('appointment_id') == str(appointment_id):
            store.reset_form()
        messages.success(request, 'Pending appointment deleted.')
        status = FetchStatus.LOADED if outcome.appointments else FetchStatus.EMPTY
    else:
        messages.error(request, outcome.error)
        status = result.status

    return _render_pending(request, PendingFetchResult(status=status, appointments=outcome.appointments))
