"""
Resume an abandoned booking from a backend pending appointment.

The pending record carries a bookingProgress marker (the next step the
patient still has to do) and whatever the backend already stored. Resuming
rebuilds the booking form from that record and jumps straight to the step
page for the marker, bypassing the forward-only rule of the sequencer.
"""
import logging
from datetime import timedelta

from django.shortcuts import redirect

from .slots import SESSION_MINUTES, AppointmentMode, format_slot_label, local_time
from .steps import STEP_ROUTES, BookingStep
from .store import BookingFormStore

logger = logging.getLogger(__name__)


def map_progress_to_route(progress) -> str:
    """Unknown markers fall back to the first step, never a later one."""
    if progress in BookingStep.values:
        return STEP_ROUTES[BookingStep(progress)]
    if progress is not None:
        logger.warning('Unrecognised bookingProgress %r; resuming at user details', progress)
    return STEP_ROUTES[BookingStep.USER_DETAILS]


def normalize_mode(mode) -> str:
    if mode in AppointmentMode.values:
        return mode
    return AppointmentMode.IN_PERSON


class ResumeReconciler:
    def __init__(self, store: BookingFormStore):
        self.store = store

    def build_form(self, appointment) -> dict:
        form = {
            'appointment_id': appointment.id,
            'patient_id': appointment.patient_id,
            'plan_slug': appointment.plan_slug,
            'plan_name': appointment.plan_name,
            'plan_price': appointment.plan_price,
            'plan_duration': appointment.plan_duration,
            'plan_package_name': appointment.plan_package_name,
            'appointment_mode': normalize_mode(appointment.mode),
        }
        # The slot step re-prompts when no slot was chosen yet
        if appointment.slot_id:
            form['slot_id'] = appointment.slot_id
            if appointment.slot_start:
                start = local_time(appointment.slot_start)
                end = local_time(appointment.slot_end) or start + timedelta(minutes=SESSION_MINUTES)
                form['appointment_date'] = start.date().isoformat()
                form['appointment_time'] = format_slot_label(start, end)
        if appointment.booking_progress in BookingStep.values:
            form['booking_progress'] = appointment.booking_progress
        return {k: v for k, v in form.items() if v is not None}

    def resume(self, appointment, navigate=redirect):
        form = self.build_form(appointment)
        # Only touch the store once the record was fully understood
        self.store.reset_form()
        self.store.set_form(form)
        route = map_progress_to_route(appointment.booking_progress)
        logger.info('Resuming appointment %s at %s', appointment.id, route)
        return navigate(route)
