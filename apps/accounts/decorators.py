"""
Authentication decorators for pages that call the backend on the user's behalf.

Those pages need both a Django login and the backend access token captured
at login. Anything else is sent to the login page with ?next= preserved.
ADMIN accounts have no patient record, so patient pages send them to the
dashboard instead.
"""
from functools import wraps
from urllib.parse import urlencode

from django.shortcuts import redirect
from django.urls import reverse

from apps.backend.client import API_TOKEN_SESSION_KEY


def clinic_login_required(view_func):
    """Any signed-in clinic account, patient or admin."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated or not request.session.get(API_TOKEN_SESSION_KEY):
            query = urlencode({'next': request.get_full_path()})
            return redirect(f"{reverse('accounts:login')}?{query}")
        return view_func(request, *args, **kwargs)
    return wrapper


def patient_login_required(view_func):
    @wraps(view_func)
    @clinic_login_required
    def wrapper(request, *args, **kwargs):
        if request.user.is_staff:
            return redirect('dashboard:appointment_list')
        return view_func(request, *args, **kwargs)
    return wrapper
