"""
Admin dashboard views — every appointment on the backend, for ADMIN accounts.

    /dashboard/?status=&mode=&date=        filtered appointment list
    /dashboard/appointments/<id>/          one appointment + invoice
"""
import logging

from django.contrib import messages
from django.db import models
from django.http import Http404
from django.shortcuts import redirect, render
from django.utils.dateparse import parse_date

from apps.backend.casing import snakeify
from apps.backend.client import get_api_client
from apps.backend.exceptions import BackendError, BackendNotFoundError
from apps.backend.messages import user_friendly_error
from apps.bookings.slots import AppointmentMode
from apps.payments.invoices import get_invoice_for_appointment

from .decorators import dashboard_admin_required

logger = logging.getLogger(__name__)


class AppointmentStatus(models.TextChoices):
    PENDING   = 'PENDING',   'Pending'
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    CANCELLED = 'CANCELLED', 'Cancelled'
    COMPLETED = 'COMPLETED', 'Completed'


def _parse_day(value):
    try:
        return parse_date(value) if value else None
    except ValueError:
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Appointment list
# ─────────────────────────────────────────────────────────────────────────────

@dashboard_admin_required
def appointment_list(request):
    status_filter = request.GET.get('status', '')
    mode_filter = request.GET.get('mode', '')
    date_filter = request.GET.get('date', '')

    # Unknown filter values are ignored rather than sent to the backend
    if status_filter not in AppointmentStatus.values:
        status_filter = ''
    if mode_filter not in AppointmentMode.values:
        mode_filter = ''
    day = _parse_day(date_filter)
    if day is None:
        date_filter = ''

    appointments, total, error = [], 0, None
    try:
        with get_api_client(request) as api:
            result = api.list_admin_appointments(
                status=status_filter or None,
                mode=mode_filter or None,
                date_iso=day.isoformat() if day else None,
            )
        appointments = [snakeify(record) for record in result['appointments']]
        total = result['total']
    except BackendError as exc:
        logger.exception('Failed to load dashboard appointments')
        error = user_friendly_error(exc, 'Failed to load appointments')

    return render(request, 'dashboard/appointments.html', {
        'appointments': appointments,
        'total': total,
        'error': error,
        'status_filter': status_filter,
        'mode_filter': mode_filter,
        'date_filter': date_filter,
        'status_choices': AppointmentStatus.choices,
        'mode_choices': AppointmentMode.choices,
    })


# ─────────────────────────────────────────────────────────────────────────────
# Appointment detail
# ─────────────────────────────────────────────────────────────────────────────

@dashboard_admin_required
def appointment_detail(request, appointment_id):
    try:
        with get_api_client(request) as api:
            appointment = snakeify(api.get_appointment(appointment_id))
            invoice = get_invoice_for_appointment(api, appointment_id)
    except BackendNotFoundError:
        raise Http404('Appointment not found')
    except BackendError as exc:
        logger.exception('Failed to load appointment %s for the dashboard', appointment_id)
        messages.error(request, user_friendly_error(exc, 'Failed to load the appointment'))
        return redirect('dashboard:appointment_list')

    return render(request, 'dashboard/appointment_detail.html', {
        'appointment': appointment,
        'invoice': invoice,
    })
