"""
Slot availability for the SLOT step.

Availability is an external collaborator behind SlotProvider. The static
provider serves the clinic's published timetable; the backend provider asks
the REST API. Pick one with settings.SLOT_PROVIDER.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)

SESSION_MINUTES = 40


class AppointmentMode(models.TextChoices):
    IN_PERSON = 'IN_PERSON', 'Clinic Visit'
    ONLINE    = 'ONLINE',    'Virtual Call'


@dataclass(frozen=True)
class Slot:
    id: str
    date: date
    start: time
    end: time
    mode: str

    @property
    def label(self) -> str:
        return format_slot_label(self.start, self.end)


def format_slot_label(start, end) -> str:
    """Times or datetimes, rendered like '10:00 AM – 10:40 AM'."""
    return f"{start.strftime('%I:%M %p')} – {end.strftime('%I:%M %p')}"


def local_time(value):
    if value is not None and timezone.is_aware(value):
        return timezone.localtime(value)
    return value


def make_slot_id(day: date, start: time, mode: str) -> str:
    return f"{day.isoformat()}T{start.strftime('%H:%M')}-{mode}"


class SlotProvider(ABC):
    @abstractmethod
    def list_available_slots(self, day: date, mode: str) -> list:
        raise NotImplementedError

    def get_slot(self, day: date, mode: str, slot_id: str):
        for slot in self.list_available_slots(day, mode):
            if slot.id == slot_id:
                return slot
        return None


class StaticSlotProvider(SlotProvider):
    """Fixed daily timetable. Closed on Sundays; no slots in the past."""

    TIMETABLE = {
        AppointmentMode.IN_PERSON: (time(10, 0), time(11, 0), time(12, 0)),
        AppointmentMode.ONLINE: (
            time(14, 0), time(15, 0), time(16, 0), time(17, 0), time(18, 0), time(19, 0),
        ),
    }

    def __init__(self, today=None):
        self._today = today

    def list_available_slots(self, day: date, mode: str) -> list:
        today = self._today or timezone.localdate()
        if day < today or day.weekday() == 6:
            return []
        slots = []
        for start in self.TIMETABLE.get(mode, ()):
            end = (datetime.combine(day, start) + timedelta(minutes=SESSION_MINUTES)).time()
            slots.append(Slot(id=make_slot_id(day, start, mode), date=day, start=start, end=end, mode=mode))
        return slots


class BackendSlotProvider(SlotProvider):
    def __init__(self, client):
        self.client = client

    def list_available_slots(self, day: date, mode: str) -> list:
        slots = []
        for record in self.client.list_slots(day.isoformat(), mode):
            start_at = parse_datetime(record.get('startAt') or '')
            end_at = parse_datetime(record.get('endAt') or '')
            if not record.get('id') or not start_at or not end_at:
                logger.warning('Skipping malformed slot record: %r', record)
                continue
            start_at, end_at = local_time(start_at), local_time(end_at)
            slots.append(Slot(
                id=str(record['id']),
                date=start_at.date(),
                start=start_at.time(),
                end=end_at.time(),
                mode=record.get('mode') or mode,
            ))
        return slots


def get_slot_provider(client) -> SlotProvider:
    if settings.SLOT_PROVIDER == 'backend':
        return BackendSlotProvider(client)
    return StaticSlotProvider()
