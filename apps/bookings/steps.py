"""
Step sequencing for the booking flow.

    USER_DETAILS → RECALL → SLOT → PAYMENT → complete

The order is fixed; only the content of USER_DETAILS varies with the plan.
Advancing is gated on a declarative table of required form fields, so every
step page applies the same emptiness rule. Going back needs no validation.
"""
from types import MappingProxyType

from django.db import models

from .exceptions import UnknownStepError
from .store import BookingFormStore


class BookingStep(models.TextChoices):
    # Values must match the backend's bookingProgress vocabulary exactly
    USER_DETAILS = 'USER_DETAILS', 'User Details'
    RECALL       = 'RECALL',       'Recall'
    SLOT         = 'SLOT',         'Slot Selection'
    PAYMENT      = 'PAYMENT',      'Payment'


STEP_ORDER = (
    BookingStep.USER_DETAILS,
    BookingStep.RECALL,
    BookingStep.SLOT,
    BookingStep.PAYMENT,
)

STEP_ROUTES = MappingProxyType({
    BookingStep.USER_DETAILS: 'bookings:user_details',
    BookingStep.RECALL:       'bookings:recall',
    BookingStep.SLOT:         'bookings:slot',
    BookingStep.PAYMENT:      'bookings:payment',
})

COMPLETE_ROUTE = 'bookings:complete'

VALIDATION_CONFIG = MappingProxyType({
    BookingStep.USER_DETAILS: ('full_name', 'mobile', 'dob', 'gender', 'weight', 'height'),
    BookingStep.RECALL:       ('daily_food', 'water_intake', 'wake_up_time', 'sleep_time'),
    BookingStep.SLOT:         ('appointment_mode', 'appointment_date', 'appointment_time', 'slot_id'),
    BookingStep.PAYMENT:      ('plan_slug', 'plan_name', 'plan_price', 'appointment_id'),
})

# Extra required fields per plan, appended to the base list
PLAN_REQUIRED_FIELDS = MappingProxyType({
    'weight-loss': MappingProxyType({
        BookingStep.USER_DETAILS: ('neck', 'waist', 'hip'),
    }),
})

FIELD_LABELS = MappingProxyType({
    'full_name': 'Full name',
    'mobile': 'Mobile number',
    'dob': 'Date of birth',
    'gender': 'Gender',
    'weight': 'Weight',
    'height': 'Height',
    'neck': 'Neck measurement',
    'waist': 'Waist measurement',
    'hip': 'Hip measurement',
    'daily_food': 'Daily food recall',
    'water_intake': 'Water intake',
    'wake_up_time': 'Wake-up time',
    'sleep_time': 'Sleep time',
    'appointment_mode': 'Consultation mode',
    'appointment_date': 'Appointment date',
    'appointment_time': 'Appointment time',
    'slot_id': 'Time slot',
    'plan_slug': 'Plan',
    'plan_name': 'Plan',
    'plan_price': 'Plan price',
    'appointment_id': 'Appointment reference',
})


def is_empty(value) -> bool:
    """Only None and '' count as missing. 0, False and whitespace are values."""
    return value is None or value == ''


def field_label(field: str) -> str:
    return FIELD_LABELS.get(field, field.replace('_', ' ').capitalize())


def label_for_progress(progress) -> str:
    if progress in BookingStep.values:
        return BookingStep(progress).label
    return BookingStep.USER_DETAILS.label


def coerce_step(step) -> BookingStep:
    try:
        return BookingStep(step)
    except ValueError:
        raise UnknownStepError(f'Unknown booking step: {step!r}') from None


class StepSequencer:
    def __init__(self, store: BookingFormStore, config=VALIDATION_CONFIG, plan_config=PLAN_REQUIRED_FIELDS):
        self.store = store
        self.config = config
        self.plan_config = plan_config

    def index(self, step) -> int:
        return STEP_ORDER.index(coerce_step(step))

    def route_for(self, step) -> str:
        return STEP_ROUTES[coerce_step(step)]

    def required_fields(self, step) -> tuple:
        step = coerce_step(step)
        fields = tuple(self.config.get(step, ()))
        plan_fields = self.plan_config.get(self.store.get('plan_slug'), {})
        return fields + tuple(f for f in plan_fields.get(step, ()) if f not in fields)

    def get_first_missing_field(self, step):
        form = self.store.get_form()
        for field in self.required_fields(step):
            if is_empty(form.get(field)):
                return field
        return None

    def validate(self, step) -> bool:
        return self.get_first_missing_field(step) is None

    def next_step(self, step):
        position = self.index(step)
        if position + 1 < len(STEP_ORDER):
            return STEP_ORDER[position + 1]
        return None

    def next_route(self, step) -> str:
        following = self.next_step(step)
        return STEP_ROUTES[following] if following else COMPLETE_ROUTE

    def previous_route(self, step):
        position = self.index(step)
        if position == 0:
            return None
        return STEP_ROUTES[STEP_ORDER[position - 1]]

    def first_incomplete_step(self, step):
        """Earliest step before `step` whose required fields are not filled in."""
        for earlier in STEP_ORDER[:self.index(step)]:
            if not self.validate(earlier):
                return earlier
        return None

    def can_enter(self, step) -> bool:
        """
        A step page may be shown when every earlier step validates, or when the
        server has already recorded progress at or beyond it (resumed booking).
        """
        position = self.index(step)
        if position == 0:
            return True
        progress = self.store.get('booking_progress')
        if progress in BookingStep.values and STEP_ORDER.index(BookingStep(progress)) >= position:
            return True
        return self.first_incomplete_step(step) is None
