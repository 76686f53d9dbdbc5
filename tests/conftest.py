import json
from datetime import timedelta

import httpx
import pytest
from django.utils import timezone

from apps.backend.client import API_TOKEN_SESSION_KEY, PATIENT_SESSION_KEY, ClinicApiClient
from apps.bookings.store import SESSION_KEY, BookingFormStore

API_BASE = 'http://backend.test/api'
API_PREFIX = '/api/'

VIEW_MODULES = (
    'apps.accounts.backends',
    'apps.accounts.views',
    'apps.bookings.views',
    'apps.patients.views',
    'apps.payments.views',
    'apps.dashboard.views',
)


class FakeBackend:
    """
    In-memory stand-in for the clinic REST API, served through
    httpx.MockTransport. Routes are keyed by (method, path) with the /api/
    prefix stripped; every request is recorded.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, json_body=None, status=200, exc=None):
        self.routes[(method, path)] = (status, json_body, exc)

    def handler(self, request):
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={'message': f'No route for {request.method} {path}'})
        status, body, exc = route
        if exc is not None:
            raise exc(f'{request.method} {path} failed', request=request)
        return httpx.Response(status, json=body if body is not None else {})

    def client(self, token='test-token'):
        return ClinicApiClient(API_BASE, token=token, transport=httpx.MockTransport(self.handler))

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == API_PREFIX + path]

    def last_json(self, method, path):
        return json.loads(self.calls(method, path)[-1].content)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend):
    with backend.client() as client:
        yield client


@pytest.fixture
def wire_backend(backend, monkeypatch):
    """Point every view module's get_api_client at the fake backend."""
    for module in VIEW_MODULES:
        monkeypatch.setattr(f'{module}.get_api_client', lambda request: backend.client())
    return backend


@pytest.fixture
def patient_client(client, django_user_model, wire_backend):
    user = django_user_model.objects.create(username='clinic-u1')
    client.force_login(user, backend='apps.accounts.backends.ClinicApiBackend')
    session = client.session
    session[API_TOKEN_SESSION_KEY] = 'test-token'
    session[PATIENT_SESSION_KEY] = 'p1'
    session.save()
    return client


@pytest.fixture
def staff_client(client, django_user_model, wire_backend):
    user = django_user_model.objects.create(username='clinic-a1', is_staff=True)
    client.force_login(user, backend='apps.accounts.backends.ClinicApiBackend')
    session = client.session
    session[API_TOKEN_SESSION_KEY] = 'admin-token'
    session.save()
    return client


@pytest.fixture
def seed_form(patient_client):
    """Write a booking form (and a known generation token) into the session."""
    def seed(**fields):
        session = patient_client.session
        session[SESSION_KEY] = dict(fields)
        session[SESSION_KEY + '_generation'] = 'gen-1'
        session.save()
    return seed


@pytest.fixture
def session_store(patient_client):
    """Read the booking form back out of the test client's session."""
    def read():
        return BookingFormStore(patient_client.session)
    return read


@pytest.fixture
def next_monday():
    today = timezone.localdate()
    return today + timedelta(days=7 - today.weekday())
