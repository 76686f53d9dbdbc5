"""
Booking flow views — 4-step multi-page form backed by Django sessions.

    /book/start/?plan=&package=   pick plan, start a fresh form
    /book/user-details/           USER_DETAILS
    /book/recall/                 RECALL
    /book/slot/                   SLOT
    /book/payment/                PAYMENT (Razorpay checkout)
    /book/complete/               terminal page, form reset on entry

Each step page is guarded by StepSequencer.can_enter(). A valid POST merges
the step's fields into the BookingFormStore, re-checks the declarative
required-field table, saves progress on the backend and redirects to the
next step. No error path clears the form.
"""
import logging
from datetime import date

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import patient_login_required
from apps.backend.client import PATIENT_SESSION_KEY, get_api_client
from apps.backend.exceptions import BackendError
from apps.backend.messages import user_friendly_error
from apps.payments.orders import ensure_order
from apps.plans.catalog import booking_metadata, get_plan

from .forms import RecallForm, SlotForm, UserDetailsForm
from .services import sync_booking_progress
from .slots import AppointmentMode, get_slot_provider
from .steps import STEP_ORDER, BookingStep, StepSequencer, field_label
from .store import BookingFormStore

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _flow(request):
    store = BookingFormStore.for_request(request)
    return store, StepSequencer(store)


def _parse_date(date_str):
    try:
        return date.fromisoformat(date_str)
    except (ValueError, TypeError):
        return None


def _guard(request, store, sequencer, step):
    """Redirect response if the step may not be shown yet, else None."""
    if not store.get('plan_slug'):
        messages.info(request, 'Please choose a plan to start booking.')
        return redirect('plans:list')
    if not sequencer.can_enter(step):
        earlier = sequencer.first_incomplete_step(step)
        messages.info(request, f'Please complete {earlier.label} first.')
        return redirect(sequencer.route_for(earlier))
    return None


def _is_stale(request, store, step):
    if store.is_current(request.POST.get('generation')):
        return False
    logger.info('Discarding stale %s submission (booking restarted)', step)
    messages.warning(request, 'This page was out of date, so nothing was saved. Please check your details.')
    return True


def _stepper(step):
    current = STEP_ORDER.index(step)
    items = []
    for position, item in enumerate(STEP_ORDER):
        if position < current:
            state = 'done'
        elif position == current:
            state = 'current'
        else:
            state = 'upcoming'
        items.append({'label': item.label, 'state': state})
    return items


def _step_context(store, sequencer, step, **extra):
    back_route = sequencer.previous_route(step)
    context = {
        'step': step,
        'stepper': _stepper(step),
        'booking': store.get_form(),
        'generation': store.generation,
        'back_url': reverse(back_route) if back_route else None,
    }
    context.update(extra)
    return context


def _initial(store, form_class, **kwargs):
    data = store.get_form()
    form = form_class(**kwargs)
    return {name: data[name] for name in form.fields if data.get(name) is not None}


def _advance(request, store, sequencer, step, form):
    """
    Merge a valid step form, gate on required fields, save progress.
    Returns a redirect on success, None when the page must be re-rendered.
    """
    store.set_form(form.booking_data())

    missing = sequencer.get_first_missing_field(step)
    if missing:
        messages.error(request, f'{field_label(missing)} is required.')
        return None

    try:
        with get_api_client(request) as api:
            sync_booking_progress(api, store, sequencer.next_step(step))
    except BackendError as exc:
        logger.exception('Saving %s progress failed', step)
        messages.error(request, user_friendly_error(exc, 'Could not save your booking. Please try again.'))
        return None

    return redirect(sequencer.next_route(step))


def _form_step(request, step, form_class, template, **form_kwargs):
    store, sequencer = _flow(request)
    guard = _guard(request, store, sequencer, step)
    if guard:
        return guard

    if request.method == 'POST':
        if _is_stale(request, store, step):
            return redirect(sequencer.route_for(step))
        form = form_class(request.POST, **form_kwargs)
        if form.is_valid():
            response = _advance(request, store, sequencer, step, form)
            if response:
                return response
    else:
        form = form_class(initial=_initial(store, form_class, **form_kwargs), **form_kwargs)

    return render(request, template, _step_context(store, sequencer, step, form=form))


# ─────────────────────────────────────────────────────────────────────────────
# Start / Cancel
# ─────────────────────────────────────────────────────────────────────────────

@patient_login_required
def start_booking(request):
    plan = get_plan(request.GET.get('plan'))
    if plan is None:
        messages.error(request, 'Please select a valid plan.')
        return redirect('plans:list')

    # New plan selection starts the form from scratch
    store = BookingFormStore.for_request(request)
    store.reset_form()
    store.set_form(booking_metadata(plan, request.GET.get('package')))
    if request.session.get(PATIENT_SESSION_KEY):
        store.set_form({'patient_id': request.session[PATIENT_SESSION_KEY]})
    return redirect('bookings:user_details')


@require_POST
@patient_login_required
def cancel_booking(request):
    BookingFormStore.for_request(request).reset_form()
    messages.info(request, 'Your booking was cancelled.')
    return redirect('plans:list')


# ─────────────────────────────────────────────────────────────────────────────
# Step 1 — User Details
# ─────────────────────────────────────────────────────────────────────────────

@patient_login_required
def user_details(request):
    plan_slug = BookingFormStore.for_request(request).get('plan_slug')
    return _form_step(
        request,
        BookingStep.USER_DETAILS,
        UserDetailsForm,
        'bookings/user_details.html',
        plan_slug=plan_slug,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Step 2 — Recall
# ─────────────────────────────────────────────────────────────────────────────

@patient_login_required
def recall(request):
    return _form_step(request, BookingStep.RECALL, RecallForm, 'bookings/recall.html')


# ─────────────────────────────────────────────────────────────────────────────
# Step 3 — Slot Selection
# ─────────────────────────────────────────────────────────────────────────────

@patient_login_required
def slot(request):
    step = BookingStep.SLOT
    store, sequencer = _flow(request)
    guard = _guard(request, store, sequencer, step)
    if guard:
        return guard

    with get_api_client(request) as api:
        provider = get_slot_provider(api)

        if request.method == 'POST':
            if _is_stale(request, store, step):
                return redirect(sequencer.route_for(step))
            form = SlotForm(request.POST, slot_provider=provider)
            try:
                valid = form.is_valid()
            except BackendError as exc:
                logger.exception('Slot lookup failed during slot submission')
                messages.error(request, user_friendly_error(exc, 'Could not check slot availability.'))
                valid = False
            if valid:
                response = _advance(request, store, sequencer, step, form)
                if response:
                    return response
            mode = request.POST.get('appointment_mode')
            day = _parse_date(request.POST.get('appointment_date'))
        else:
            form = SlotForm(initial=_initial(store, SlotForm), slot_provider=provider)
            mode = request.GET.get('mode') or store.get('appointment_mode')
            day = _parse_date(request.GET.get('date') or store.get('appointment_date'))

        if mode not in AppointmentMode.values:
            mode = AppointmentMode.IN_PERSON

        slots = []
        if day:
            try:
                slots = provider.list_available_slots(day, mode)
            except BackendError as exc:
                logger.exception('Listing slots for %s %s failed', day, mode)
                messages.error(request, user_friendly_error(exc, 'Could not load available slots.'))

    return render(request, 'bookings/slot.html', _step_context(
        store, sequencer, step,
        form=form,
        mode=mode,
        modes=AppointmentMode.choices,
        selected_date=day,
        slots=slots,
        selected_slot_id=store.get('slot_id'),
    ))


# ─────────────────────────────────────────────────────────────────────────────
# Step 4 — Payment
# ─────────────────────────────────────────────────────────────────────────────

@patient_login_required
def payment(request):
    step = BookingStep.PAYMENT
    store, sequencer = _flow(request)
    guard = _guard(request, store, sequencer, step)
    if guard:
        return guard

    missing = sequencer.get_first_missing_field(step)
    if missing:
        messages.error(request, f'{field_label(missing)} is missing. Please review your booking.')
        return redirect(sequencer.previous_route(step))

    form = store.get_form()
    order = None
    try:
        with get_api_client(request) as api:
            order = ensure_order(api, form['appointment_id'])
    except BackendError as exc:
        logger.exception('Could not prepare payment for appointment %s', form['appointment_id'])
        messages.error(request, user_friendly_error(exc, 'Could not connect to the payment gateway. Please try again.'))

    return render(request, 'bookings/payment.html', _step_context(
        store, sequencer, step,
        order=order,
        razorpay_key_id=settings.RAZORPAY_KEY_ID,
        callback_url=request.build_absolute_uri(reverse('payments:callback')),
    ))


# ─────────────────────────────────────────────────────────────────────────────
# Booking Complete
# ─────────────────────────────────────────────────────────────────────────────

@patient_login_required
def complete(request):
    """Terminal state: the confirmed booking no longer needs the form."""
    store = BookingFormStore.for_request(request)
    summary = store.get_form()
    store.reset_form()
    return render(request, 'bookings/complete.html', {
        'booking': summary,
        'appointment_id': request.GET.get('appointment') or summary.get('appointment_id'),
    })
