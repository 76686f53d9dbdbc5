"""
Dashboard authentication decorator.

Unauthenticated requests go to the login page with ?next= preserved (see
clinic_login_required). Signed-in patients get a 403: the dashboard is for
ADMIN accounts only.
"""
from functools import wraps

from django.core.exceptions import PermissionDenied

from apps.accounts.decorators import clinic_login_required


def dashboard_admin_required(view_func):
    """Require a clinic login with is_staff (backend role ADMIN)."""
    @wraps(view_func)
    @clinic_login_required
    def wrapper(request, *args, **kwargs):
        if not request.user.is_staff:
            raise PermissionDenied('Admin access required')
        return view_func(request, *args, **kwargs)
    return wrapper
