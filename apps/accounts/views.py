"""
Login / logout against the clinic backend.
"""
import logging

from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from apps.backend.client import API_TOKEN_SESSION_KEY, PATIENT_SESSION_KEY, get_api_client
from apps.backend.exceptions import BackendError
from apps.backend.messages import user_friendly_error

logger = logging.getLogger(__name__)


def _safe_next(request, candidate):
    if candidate and url_has_allowed_host_and_scheme(
        candidate, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return candidate
    return None


def _home_for(user):
    return 'dashboard:appointment_list' if user.is_staff else 'patients:pending_list'


def login_view(request):
    next_url = request.POST.get('next', '') or request.GET.get('next', '')

    if request.user.is_authenticated and request.session.get(API_TOKEN_SESSION_KEY):
        return redirect(_safe_next(request, next_url) or _home_for(request.user))

    if request.method == 'POST':
        identifier = request.POST.get('identifier', '').strip()
        password = request.POST.get('password', '')
        try:
            user = authenticate(request, username=identifier, password=password)
        except BackendError as exc:
            logger.exception('Login failed: backend error for %s', identifier)
            messages.error(request, user_friendly_error(exc))
            user = None
        else:
            if user is None:
                messages.error(request, 'Invalid email/phone or password. Please try again.')

        if user is not None:
            clinic_session = getattr(user, 'clinic_session', {})
            login(request, user)
            request.session[API_TOKEN_SESSION_KEY] = clinic_session.get('token')
            request.session[PATIENT_SESSION_KEY] = clinic_session.get('patient_id')
            return redirect(_safe_next(request, next_url) or _home_for(request.user))

    return render(request, 'accounts/login.html', {'next': next_url})


@require_POST
def logout_view(request):
    if request.session.get(API_TOKEN_SESSION_KEY):
        try:
            with get_api_client(request) as api:
                api.logout()
        except BackendError:
            # Local logout still proceeds; the backend token simply expires
            logger.warning('Backend logout failed for user %s', request.user.pk)
    logout(request)
    return redirect('pages:home')
