import httpx
import pytest
from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.urls import reverse

from apps.backend.client import API_TOKEN_SESSION_KEY, PATIENT_SESSION_KEY

pytestmark = pytest.mark.django_db

LOGIN_OK = {
    'accessToken': 'tok-9',
    'user': {'id': 'u9', 'name': 'Asha Menon', 'email': 'asha@example.com', 'role': 'PATIENT', 'patientId': 'p9'},
}


def messages_of(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


def test_login_stores_backend_session(client, wire_backend):
    wire_backend.add('POST', 'auth/login', LOGIN_OK)

    response = client.post(reverse('accounts:login'), {'identifier': 'asha@example.com', 'password': 'secret'})

    assert response.url == reverse('patients:pending_list')
    assert client.session[API_TOKEN_SESSION_KEY] == 'tok-9'
    assert client.session[PATIENT_SESSION_KEY] == 'p9'
    user = get_user_model().objects.get(username='clinic-u9')
    assert user.email == 'asha@example.com'
    assert not user.is_staff


def test_admin_role_is_staff(client, wire_backend):
    wire_backend.add('POST', 'auth/login', dict(LOGIN_OK, user=dict(LOGIN_OK['user'], role='ADMIN')))
    client.post(reverse('accounts:login'), {'identifier': 'admin@example.com', 'password': 'secret'})
    assert get_user_model().objects.get(username='clinic-u9').is_staff


def test_admin_login_lands_on_dashboard(client, wire_backend):
    wire_backend.add('POST', 'auth/login', dict(LOGIN_OK, user=dict(LOGIN_OK['user'], role='ADMIN')))
    response = client.post(reverse('accounts:login'), {'identifier': 'admin@example.com', 'password': 'secret'})
    assert response.url == reverse('dashboard:appointment_list')


def test_login_honours_safe_next(client, wire_backend):
    wire_backend.add('POST', 'auth/login', LOGIN_OK)
    response = client.post(reverse('accounts:login'), {
        'identifier': 'asha@example.com', 'password': 'secret', 'next': reverse('plans:list'),
    })
    assert response.url == reverse('plans:list')


def test_login_ignores_offsite_next(client, wire_backend):
    wire_backend.add('POST', 'auth/login', LOGIN_OK)
    response = client.post(reverse('accounts:login'), {
        'identifier': 'asha@example.com', 'password': 'secret', 'next': 'https://evil.example.com/',
    })
    assert response.url == reverse('patients:pending_list')


def test_wrong_password(client, wire_backend):
    wire_backend.add('POST', 'auth/login', {'message': 'Invalid credentials'}, status=401)

    response = client.post(reverse('accounts:login'), {'identifier': 'asha@example.com', 'password': 'nope'})

    assert response.status_code == 200
    assert 'Invalid email/phone or password. Please try again.' in messages_of(response)
    assert API_TOKEN_SESSION_KEY not in client.session


def test_backend_down_during_login(client, wire_backend):
    wire_backend.add('POST', 'auth/login', exc=httpx.ConnectError)

    response = client.post(reverse('accounts:login'), {'identifier': 'asha@example.com', 'password': 'secret'})

    assert response.status_code == 200
    assert 'Something went wrong. Please reload the page.' in messages_of(response)


def test_logout_succeeds_even_if_backend_fails(patient_client, wire_backend):
    wire_backend.add('POST', 'auth/logout', {'message': 'boom'}, status=500)

    response = patient_client.post(reverse('accounts:logout'))

    assert response.url == reverse('pages:home')
    assert API_TOKEN_SESSION_KEY not in patient_client.session


def test_logged_in_without_token_is_sent_to_login(client, django_user_model):
    user = django_user_model.objects.create(username='clinic-u1')
    client.force_login(user, backend='apps.accounts.backends.ClinicApiBackend')
    response = client.get(reverse('patients:pending_list'))
    assert response.url.startswith(reverse('accounts:login'))
