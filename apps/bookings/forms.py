import re
from datetime import date

from django import forms
from django.utils import timezone

from .slots import AppointmentMode
from .store import EXTENDED_MEASUREMENT_FIELDS

WEIGHT_LOSS_PLAN = 'weight-loss'
# Extended measurements that become mandatory on the weight-loss plan
WEIGHT_LOSS_REQUIRED = ('neck', 'waist', 'hip')
BASIC_OPTIONAL_MEASUREMENTS = ('neck', 'waist', 'hip')

GENDER_CHOICES = (
    ('', 'Select gender'),
    ('FEMALE', 'Female'),
    ('MALE', 'Male'),
    ('OTHER', 'Other'),
)

SLEEP_QUALITY_CHOICES = (
    ('', 'Select'),
    ('GOOD', 'Good'),
    ('AVERAGE', 'Average'),
    ('POOR', 'Poor'),
)


def normalize_phone(raw: str) -> str:
    """
    Normalise an Indian mobile number to exactly 10 digits.

      +91 98765 43210  →  9876543210
      091-9876543210   →  9876543210
      09876543210      →  9876543210

    Raises ValueError if the result is not 10 digits.
    """
    digits = re.sub(r'\D', '', raw)

    if len(digits) == 12 and digits.startswith('91'):
        digits = digits[2:]
    elif len(digits) == 11 and digits.startswith('0'):
        digits = digits[1:]

    if len(digits) != 10:
        raise ValueError(
            f"Cannot normalise phone number '{raw}' — "
            f"expected 10 digits after normalisation, got {len(digits)}."
        )
    return digits


def calc_age_from_dob(dob, today=None):
    if not dob:
        return None
    if isinstance(dob, str):
        dob = date.fromisoformat(dob)
    today = today or timezone.localdate()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def _measurement_field(label, required=False):
    return forms.CharField(
        required=required,
        max_length=6,
        label=label,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'inputmode': 'numeric',
            'placeholder': label + (' *' if required else ''),
        }),
    )


class StepForm(forms.Form):
    """
    Base for step forms. cleaned_data is converted to session-safe values
    (dates as ISO strings) by booking_data().
    """

    def booking_data(self) -> dict:
        data = {}
        for name, value in self.cleaned_data.items():
            if isinstance(value, date):
                value = value.isoformat()
            data[name] = value
        return data


class UserDetailsForm(StepForm):
    full_name = forms.CharField(
        max_length=120,
        label='Full Name',
        widget=forms.TextInput(attrs={'class': 'form-control', 'autocomplete': 'name'}),
    )
    mobile = forms.CharField(
        max_length=20,
        label='Mobile Number',
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'e.g. 98765 43210',
            'autocomplete': 'tel',
            'inputmode': 'numeric',
        }),
    )
    email = forms.EmailField(
        required=False,
        label='Email Address (optional)',
        widget=forms.EmailInput(attrs={'class': 'form-control', 'autocomplete': 'email'}),
    )
    dob = forms.DateField(
        label='Date of Birth',
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
    )
    gender = forms.ChoiceField(choices=GENDER_CHOICES, widget=forms.Select(attrs={'class': 'form-control'}))
    address = forms.CharField(
        required=False,
        max_length=300,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
    )
    weight = _measurement_field('Weight (kg)', required=True)
    height = _measurement_field('Height (cm)', required=True)
    medical_history = forms.CharField(
        required=False,
        max_length=2000,
        label='Medical History',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
    )
    appointment_concerns = forms.CharField(
        required=False,
        max_length=1000,
        label='What would you like to discuss?',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
    )

    def __init__(self, *args, plan_slug=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.plan_slug = plan_slug
        if plan_slug == WEIGHT_LOSS_PLAN:
            for name in EXTENDED_MEASUREMENT_FIELDS:
                label = name.replace('_', ' ').capitalize() + ' (cm)'
                self.fields[name] = _measurement_field(label, required=name in WEIGHT_LOSS_REQUIRED)
        else:
            for name in BASIC_OPTIONAL_MEASUREMENTS:
                self.fields[name] = _measurement_field(name.capitalize() + ' (cm)')

    @property
    def measurement_fields(self):
        names = ('weight', 'height') + EXTENDED_MEASUREMENT_FIELDS
        return [self[name] for name in names if name in self.fields]

    @property
    def detail_fields(self):
        measurements = {'weight', 'height', *EXTENDED_MEASUREMENT_FIELDS}
        return [self[name] for name in self.fields if name not in measurements]

    def clean_mobile(self):
        raw = self.cleaned_data.get('mobile', '')
        try:
            return normalize_phone(raw)
        except ValueError as exc:
            raise forms.ValidationError(
                "Please enter a valid 10-digit Indian mobile number "
                "(e.g. 98765 43210 or +91 98765 43210)."
            ) from exc

    def clean_dob(self):
        dob = self.cleaned_data['dob']
        if dob > timezone.localdate():
            raise forms.ValidationError('Date of birth cannot be in the future.')
        return dob

    def clean(self):
        cleaned = super().clean()
        # Measurements are numeric only; keep digits like the input mask does
        for name in ('weight', 'height') + EXTENDED_MEASUREMENT_FIELDS:
            if name in cleaned and cleaned[name]:
                digits = re.sub(r'\D', '', cleaned[name])
                if not digits and self.fields[name].required:
                    self.add_error(name, 'Enter a number.')
                    continue
                cleaned[name] = digits
        return cleaned

    def booking_data(self) -> dict:
        data = super().booking_data()
        data['age'] = calc_age_from_dob(self.cleaned_data.get('dob'))
        return data


class RecallForm(StepForm):
    bowel = forms.CharField(
        required=False,
        max_length=200,
        label='Bowel movement',
        widget=forms.TextInput(attrs={'class': 'form-control'}),
    )
    daily_food = forms.CharField(
        max_length=3000,
        label='What did you eat in the last 24 hours?',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 5}),
    )
    water_intake = forms.CharField(
        max_length=50,
        label='Water intake (litres/day)',
        widget=forms.TextInput(attrs={'class': 'form-control'}),
    )
    wake_up_time = forms.TimeField(
        label='Wake-up time',
        widget=forms.TimeInput(attrs={'class': 'form-control', 'type': 'time'}),
    )
    sleep_time = forms.TimeField(
        label='Sleep time',
        widget=forms.TimeInput(attrs={'class': 'form-control', 'type': 'time'}),
    )
    sleep_quality = forms.ChoiceField(
        required=False,
        choices=SLEEP_QUALITY_CHOICES,
        widget=forms.Select(attrs={'class': 'form-control'}),
    )

    def booking_data(self) -> dict:
        data = super().booking_data()
        for name in ('wake_up_time', 'sleep_time'):
            data[name] = self.cleaned_data[name].strftime('%H:%M')
        return data


class SlotForm(StepForm):
    """
    Mode + date + one of the provider's slots for that date/mode. The
    provider is passed in so availability stays outside the form.
    """
    appointment_mode = forms.ChoiceField(
        choices=AppointmentMode.choices,
        widget=forms.RadioSelect,
        label='Consultation mode',
    )
    appointment_date = forms.DateField(
        label='Date',
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
    )
    slot_id = forms.CharField(max_length=100, widget=forms.HiddenInput)

    def __init__(self, *args, slot_provider=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.slot_provider = slot_provider
        self.slot = None

    def clean_appointment_date(self):
        day = self.cleaned_data['appointment_date']
        if day < timezone.localdate():
            raise forms.ValidationError('Please choose a valid future date.')
        if day.weekday() == 6:
            raise forms.ValidationError('The clinic is closed on Sundays.')
        return day

    def clean(self):
        cleaned = super().clean()
        mode = cleaned.get('appointment_mode')
        day = cleaned.get('appointment_date')
        slot_id = cleaned.get('slot_id')
        if mode and day and slot_id and self.slot_provider is not None:
            self.slot = self.slot_provider.get_slot(day, mode, slot_id)
            if self.slot is None:
                self.add_error('slot_id', 'That slot is no longer available. Please pick another time.')
        return cleaned

    def booking_data(self) -> dict:
        data = super().booking_data()
        data['appointment_time'] = self.slot.label if self.slot else ''
        return data
