"""
Booking form store for the multi-step booking flow.

The in-flight booking form lives in request.session['booking_form']:
{
    "plan_slug":        "weight-loss",
    "plan_name":        "Weight Loss Plan",
    "plan_price":       "₹17,800",
    "full_name":        "...",
    "weight":           "70",
    ...
    "appointment_mode": "IN_PERSON",
    "slot_id":          "2026-10-19T10:00-IN_PERSON",
    "appointment_id":   "<backend id>",
}

The store is a pure merge-accumulator: set_form() overwrites only the keys it
is given and reset_form() is the only way to clear fields. Use it instead of
touching session['booking_form'] directly.
"""
import logging
import uuid

logger = logging.getLogger(__name__)

SESSION_KEY = 'booking_form'
GENERATION_SUFFIX = '_generation'

IDENTITY_FIELDS = ('full_name', 'mobile', 'email', 'dob', 'age', 'gender', 'address')
MEASUREMENT_FIELDS = ('weight', 'height')
# Detailed body measurements, asked for on the weight-loss plan
EXTENDED_MEASUREMENT_FIELDS = (
    'neck', 'waist', 'hip', 'chest', 'chest_female', 'arms', 'forearms', 'wrist',
    'abdomen_upper', 'abdomen_lower', 'thigh_upper', 'thigh_lower', 'calf', 'ankle',
    'normal_chest_lung', 'expanded_chest_lungs',
)
MEDICAL_FIELDS = ('medical_history', 'reports', 'appointment_concerns')
LIFESTYLE_FIELDS = ('bowel', 'daily_food', 'water_intake', 'wake_up_time', 'sleep_time', 'sleep_quality')
SCHEDULING_FIELDS = ('appointment_mode', 'appointment_date', 'appointment_time', 'slot_id')
PLAN_FIELDS = ('plan_slug', 'plan_name', 'plan_price', 'plan_package_name', 'plan_duration')
RESUME_FIELDS = ('appointment_id', 'patient_id', 'booking_progress')

BOOKING_FIELDS = frozenset(
    IDENTITY_FIELDS + MEASUREMENT_FIELDS + EXTENDED_MEASUREMENT_FIELDS + MEDICAL_FIELDS
    + LIFESTYLE_FIELDS + SCHEDULING_FIELDS + PLAN_FIELDS + RESUME_FIELDS
)


class _Unset:
    """Marker for "no value given"; merging it leaves the stored value alone."""

    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET = _Unset()


class BookingFormStore:
    """
    Session-scoped booking form.

    `backend` is any mutable mapping: request.session in views, a plain dict
    in tests. Each browser session gets its own store.
    """

    def __init__(self, backend, key: str = SESSION_KEY):
        self._backend = backend
        self._key = key
        self._generation_key = key + GENERATION_SUFFIX

    @classmethod
    def for_request(cls, request) -> 'BookingFormStore':
        return cls(request.session)

    def get_form(self) -> dict:
        return dict(self._backend.get(self._key, {}))

    def get(self, field: str, default=None):
        return self._backend.get(self._key, {}).get(field, default)

    def set_form(self, partial=None, **fields) -> None:
        updates = dict(partial or {}, **fields)
        form = self.get_form()
        for field, value in updates.items():
            if value is UNSET:
                continue
            if field not in BOOKING_FIELDS:
                logger.warning('Ignoring unknown booking form field %r', field)
                continue
            form[field] = value
        # Reassign so the session notices the change
        self._backend[self._key] = form

    def reset_form(self) -> None:
        self._backend[self._key] = {}
        self._backend[self._generation_key] = uuid.uuid4().hex

    @property
    def generation(self) -> str:
        """Token identifying the current booking; changes on every reset."""
        token = self._backend.get(self._generation_key)
        if not token:
            token = uuid.uuid4().hex
            self._backend[self._generation_key] = token
        return token

    def is_current(self, generation) -> bool:
        return bool(generation) and generation == self.generation
