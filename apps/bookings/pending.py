"""
Pending appointments: bookings the backend saved part-way through the flow.

The backend owns these records; the front-end only lists them, resumes them
(see resume.py) or asks the backend to delete them. Fetching returns a
tri-state result so "nothing pending" and "could not load" stay distinct.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime

from django.db import models
from django.utils.dateparse import parse_datetime

from apps.backend.exceptions import BackendError
from apps.backend.messages import user_friendly_error

from .exceptions import AppointmentNotFoundError, MalformedAppointmentError
from .steps import label_for_progress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingAppointment:
    id: str
    patient_id: str | None = None
    plan_slug: str | None = None
    plan_name: str | None = None
    plan_price: str | None = None
    plan_duration: str | None = None
    plan_package_name: str | None = None
    mode: str | None = None
    slot_id: str | None = None
    booking_progress: str | None = None
    # Display only
    slot_start: datetime | None = None
    slot_end: datetime | None = None
    patient_name: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> 'PendingAppointment':
        if not isinstance(data, dict) or not data.get('id'):
            raise MalformedAppointmentError(f'Pending appointment without id: {data!r}')

        slot = data.get('slot') or {}
        patient = data.get('patient') or {}
        slot_id = data.get('slotId') or slot.get('id')
        return cls(
            id=str(data['id']),
            patient_id=_str_or_none(data.get('patientId') or patient.get('id')),
            plan_slug=data.get('planSlug'),
            plan_name=data.get('planName'),
            plan_price=_str_or_none(data.get('planPrice')),
            plan_duration=data.get('planDuration'),
            plan_package_name=data.get('planPackageName'),
            mode=data.get('mode'),
            slot_id=_str_or_none(slot_id),
            booking_progress=data.get('bookingProgress'),
            slot_start=_parse_dt(slot.get('startAt')),
            slot_end=_parse_dt(slot.get('endAt')),
            patient_name=patient.get('name'),
        )

    @property
    def progress_label(self) -> str:
        return label_for_progress(self.booking_progress)


def _str_or_none(value):
    return None if value is None or value == '' else str(value)


def _parse_dt(value):
    if not value:
        return None
    try:
        return parse_datetime(value)
    except (TypeError, ValueError):
        return None


class FetchStatus(models.TextChoices):
    LOADED = 'LOADED', 'Loaded'
    EMPTY  = 'EMPTY',  'No pending appointments'
    FAILED = 'FAILED', 'Could not load'


@dataclass
class PendingFetchResult:
    status: str
    appointments: list = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status == FetchStatus.FAILED


@dataclass
class DeleteOutcome:
    appointments: list
    deleted: bool = False
    error: str | None = None


def parse_pending_appointments(records) -> list:
    appointments = []
    for record in records or []:
        try:
            appointments.append(PendingAppointment.from_api(record))
        except MalformedAppointmentError:
            logger.warning('Skipping malformed pending appointment record: %r', record)
    return appointments


def fetch_pending_appointments(client, patient_id=None) -> PendingFetchResult:
    try:
        records = client.list_pending_appointments(patient_id=patient_id)
    except BackendError as exc:
        logger.exception('Failed to fetch pending appointments (patient=%s)', patient_id)
        return PendingFetchResult(
            status=FetchStatus.FAILED,
            error=user_friendly_error(exc, 'Failed to load pending appointments'),
        )

    appointments = parse_pending_appointments(records)
    status = FetchStatus.LOADED if appointments else FetchStatus.EMPTY
    return PendingFetchResult(status=status, appointments=appointments)


def find_appointment(appointments, appointment_id: str) -> PendingAppointment:
    for appointment in appointments:
        if appointment.id == str(appointment_id):
            return appointment
    raise AppointmentNotFoundError(f'Pending appointment {appointment_id} not found')


def delete_pending_appointment(client, appointments, appointment_id: str) -> DeleteOutcome:
    """
    Delete on the backend, then drop the row. Never removes optimistically:
    a row that only looks pending may already be confirmed server-side.
    """
    appointments = list(appointments)
    try:
        client.delete_pending_appointment(appointment_id)
    except BackendError as exc:
        logger.exception('Failed to delete pending appointment %s', appointment_id)
        return DeleteOutcome(
            appointments=appointments,
            error=user_friendly_error(exc, 'Failed to delete appointment'),
        )

    logger.info('Pending appointment %s deleted', appointment_id)
    remaining = [a for a in appointments if a.id != str(appointment_id)]
    return DeleteOutcome(appointments=remaining, deleted=True)
