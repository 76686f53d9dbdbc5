import logging

from apps.bookings.store import SESSION_KEY, UNSET, BookingFormStore


def make_store(**initial):
    backend = {}
    if initial:
        backend[SESSION_KEY] = dict(initial)
    return BookingFormStore(backend), backend


def test_set_form_merges_without_touching_other_fields():
    store, _ = make_store(full_name='Asha', weight='68')
    store.set_form({'weight': '70'})
    assert store.get_form() == {'full_name': 'Asha', 'weight': '70'}


def test_set_form_accepts_keyword_fields():
    store, _ = make_store()
    store.set_form(plan_slug='weight-loss', plan_name='Weight Loss Plan')
    assert store.get('plan_slug') == 'weight-loss'
    assert store.get('plan_name') == 'Weight Loss Plan'


def test_unset_leaves_stored_value_alone():
    store, _ = make_store(mobile='9876543210')
    store.set_form({'mobile': UNSET, 'full_name': 'Asha'})
    assert store.get('mobile') == '9876543210'


def test_none_is_stored_explicitly():
    store, _ = make_store(email='a@example.com')
    store.set_form({'email': None})
    form = store.get_form()
    assert 'email' in form
    assert form['email'] is None


def test_unknown_fields_are_dropped_and_logged(caplog):
    store, _ = make_store()
    with caplog.at_level(logging.WARNING, logger='apps.bookings.store'):
        store.set_form({'favourite_colour': 'green', 'full_name': 'Asha'})
    assert store.get_form() == {'full_name': 'Asha'}
    assert 'favourite_colour' in caplog.text


def test_get_form_returns_a_copy():
    store, _ = make_store(full_name='Asha')
    form = store.get_form()
    form['full_name'] = 'Someone else'
    assert store.get('full_name') == 'Asha'


def test_reset_clears_form_and_rotates_generation():
    store, _ = make_store(full_name='Asha', appointment_id='apt-1')
    before = store.generation
    store.reset_form()
    assert store.get_form() == {}
    assert store.generation != before
    assert not store.is_current(before)


def test_generation_is_stable_between_resets():
    store, _ = make_store()
    assert store.generation == store.generation
    assert store.is_current(store.generation)


def test_is_current_rejects_missing_token():
    store, _ = make_store()
    assert not store.is_current(None)
    assert not store.is_current('')


def test_stores_are_isolated_per_backend():
    first, _ = make_store()
    second, _ = make_store()
    first.set_form(full_name='Asha')
    assert second.get_form() == {}


def test_fresh_store_then_partial_merge():
    store, _ = make_store()
    assert store.get_form() == {}
    store.set_form({'plan_slug': 'weight-loss', 'weight': '70'})
    assert store.get('weight') == '70'
    assert 'height' not in store.get_form()


def test_later_merge_wins_on_overlap_only():
    store, _ = make_store()
    store.set_form({'full_name': 'Asha', 'weight': '68', 'gender': 'FEMALE'})
    store.set_form({'weight': '70', 'height': '162'})
    assert store.get_form() == {'full_name': 'Asha', 'weight': '70', 'gender': 'FEMALE', 'height': '162'}
