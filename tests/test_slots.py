from datetime import date, datetime, time, timedelta, timezone as dt_timezone

import pytest

from apps.bookings.slots import (
    AppointmentMode,
    BackendSlotProvider,
    StaticSlotProvider,
    format_slot_label,
    get_slot_provider,
    local_time,
    make_slot_id,
)

MONDAY = date(2026, 10, 19)


def test_static_in_person_timetable():
    slots = StaticSlotProvider(today=MONDAY).list_available_slots(MONDAY, AppointmentMode.IN_PERSON)
    assert [s.start for s in slots] == [time(10), time(11), time(12)]
    assert slots[0].end == time(10, 40)
    assert slots[0].label == '10:00 AM – 10:40 AM'
    assert slots[0].id == '2026-10-19T10:00-IN_PERSON'


def test_static_online_timetable():
    slots = StaticSlotProvider(today=MONDAY).list_available_slots(MONDAY, AppointmentMode.ONLINE)
    assert len(slots) == 6
    assert slots[-1].start == time(19)


def test_no_slots_on_sunday_or_in_the_past():
    provider = StaticSlotProvider(today=MONDAY)
    assert provider.list_available_slots(MONDAY + timedelta(days=6), AppointmentMode.IN_PERSON) == []
    assert provider.list_available_slots(MONDAY - timedelta(days=1), AppointmentMode.IN_PERSON) == []


def test_get_slot_by_id():
    provider = StaticSlotProvider(today=MONDAY)
    slot_id = make_slot_id(MONDAY, time(11), AppointmentMode.IN_PERSON)
    assert provider.get_slot(MONDAY, AppointmentMode.IN_PERSON, slot_id).start == time(11)
    assert provider.get_slot(MONDAY, AppointmentMode.ONLINE, slot_id) is None


def test_backend_provider_parses_and_skips_malformed(backend, api):
    backend.add('GET', 'slots', {'slots': [
        {'id': 's-1', 'startAt': '2026-10-19T10:00:00', 'endAt': '2026-10-19T10:40:00', 'mode': 'IN_PERSON'},
        {'id': 's-2', 'startAt': 'garbage'},
    ]})
    slots = BackendSlotProvider(api).list_available_slots(MONDAY, AppointmentMode.IN_PERSON)

    assert [s.id for s in slots] == ['s-1']
    assert slots[0].start == time(10)
    assert slots[0].end == time(10, 40)


@pytest.mark.parametrize('setting, provider_class', [
    ('static', StaticSlotProvider),
    ('backend', BackendSlotProvider),
])
def test_provider_selected_by_setting(settings, api, setting, provider_class):
    settings.SLOT_PROVIDER = setting
    assert isinstance(get_slot_provider(api), provider_class)


def test_format_slot_label_accepts_times_and_datetimes():
    assert format_slot_label(time(14), time(14, 40)) == '02:00 PM – 02:40 PM'
    assert format_slot_label(datetime(2026, 10, 19, 9), datetime(2026, 10, 19, 9, 40)) == '09:00 AM – 09:40 AM'


def test_local_time_converts_aware_values_only():
    aware = datetime(2026, 10, 19, 4, 30, tzinfo=dt_timezone.utc)
    assert local_time(aware).strftime('%Y-%m-%d %H:%M') == '2026-10-19 10:00'
    naive = datetime(2026, 10, 19, 10, 0)
    assert local_time(naive) is naive
    assert local_time(None) is None
