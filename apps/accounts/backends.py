"""
Django authentication backend that delegates credential checks to the clinic
REST backend.

A local shadow User row is kept per backend account so Django sessions,
django-axes lockouts and `request.user` work as usual. The backend's access
token is handed to the login view on `user.clinic_session`; the view stores
it in the session after django.contrib.auth.login() has rotated the key.
"""
import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend

from apps.backend.client import get_api_client
from apps.backend.exceptions import BackendResponseError

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'ADMIN'


class ClinicApiBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        if request is None or not username or not password:
            return None

        # Unreachable backend / timeouts propagate; the view reports them
        with get_api_client(request) as api:
            try:
                payload = api.login(username, password)
            except BackendResponseError as exc:
                logger.info('Backend rejected login for %s (status %s)', username, exc.status_code)
                return None

        account = payload.get('user') or {}
        token = payload.get('accessToken')
        if not account.get('id') or not token:
            logger.warning('Login response for %s is missing user id or token', username)
            return None

        user_model = get_user_model()
        user, created = user_model.objects.get_or_create(username=f"clinic-{account['id']}")
        user.email = account.get('email') or ''
        user.first_name = (account.get('name') or '')[:150]
        user.is_staff = account.get('role') == ADMIN_ROLE
        if created:
            user.set_unusable_password()
        user.save()

        user.clinic_session = {
            'token': token,
            'patient_id': account.get('patientId'),
            'role': account.get('role'),
        }
        return user

    def get_user(self, user_id):
        user_model = get_user_model()
        return user_model.objects.filter(pk=user_id, is_active=True).first()
