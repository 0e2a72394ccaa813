import pytest
from django.test import override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from facility.models import Department, User

pytestmark = pytest.mark.django_db


def login(client, username, password):
    return client.post(reverse('login_view'), {'username': username, 'password': password}, format='json')


def test_writes_open_by_default(api):
    r = api.post('/v1/web/departments', {'name': 'Radiology'}, format='json')
    assert r.status_code == 201


@override_settings(API_WRITE_REQUIRES_AUTH=True)
def test_protected_writes_reject_anonymous(api):
    r = api.post('/v1/web/departments', {'name': 'Radiology'}, format='json')
    assert r.status_code in (401, 403)
    assert r.data['ok'] is False
    assert not Department.objects.exists()
    # reads stay open for the dashboard
    assert api.get('/v1/web/departments').status_code == 200


@override_settings(API_WRITE_REQUIRES_AUTH=True)
def test_protected_writes_reject_viewer(api):
    viewer = User.objects.create_user(username='viewer1', password='P@ssw0rd1', role='viewer')
    api.force_authenticate(user=viewer)
    r = api.post('/v1/web/departments', {'name': 'Radiology'}, format='json')
    assert r.status_code == 403


@override_settings(API_WRITE_REQUIRES_AUTH=True)
def test_manager_token_can_write():
    User.objects.create_user(username='manager1', password='P@ssw0rd1', role='manager')
    client = APIClient()
    r = login(client, 'manager1', 'P@ssw0rd1')
    assert r.status_code == 200
    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    r = client.post('/v1/web/departments', {'name': 'Radiology'}, format='json')
    assert r.status_code == 201


@override_settings(API_WRITE_REQUIRES_AUTH=True)
def test_manager_jwt_can_write():
    User.objects.create_user(username='admin1', password='P@ssw0rd1', role='admin')
    client = APIClient()
    r = login(client, 'admin1', 'P@ssw0rd1')
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    r = client.post('/v1/web/departments', {'name': 'Radiology'}, format='json')
    assert r.status_code == 201


def test_login_returns_jwt_and_legacy_token():
    User.objects.create_user(username='u_jwt', password='P@ssw0rd1', role='manager')
    r = login(APIClient(), 'u_jwt', 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['ok'] is True
    assert r.data['token'] and r.data['jwt_access'] and r.data['jwt_refresh']
    assert r.data['user']['role'] == 'manager'


def test_login_role_cannot_be_escalated():
    u = User.objects.create_user(username='u1', password='P@ssw0rd1')
    r = APIClient().post(reverse('login_view'), {'username': 'u1', 'password': 'P@ssw0rd1', 'role': 'admin'}, format='json')
    assert r.status_code == 200
    u.refresh_from_db()
    assert u.role == 'viewer'


def test_login_wrong_password():
    User.objects.create_user(username='u1', password='P@ssw0rd1')
    r = login(APIClient(), 'u1', 'wrong')
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_refresh_then_logout_blacklists():
    User.objects.create_user(username='u1', password='P@ssw0rd1', role='manager')
    client = APIClient()
    tokens = login(client, 'u1', 'P@ssw0rd1').data

    r = client.post(reverse('jwt_refresh_view'), {'refresh': tokens['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['jwt_access']

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['jwt_access']}")
    r = client.post(reverse('jwt_logout_view'), {'refresh': tokens['jwt_refresh']}, format='json')
    assert r.data == {'ok': True, 'blacklisted': 1}

    r = APIClient().post(reverse('jwt_refresh_view'), {'refresh': tokens['jwt_refresh']}, format='json')
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_healthz(client):
    r = client.get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def test_refresh_errors_use_error_envelope():
    r = APIClient().post(reverse('jwt_refresh_view'), {'refresh': 'not-a-token'}, format='json')
    assert r.status_code == 401
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'token_not_valid'

    r = APIClient().post(reverse('jwt_refresh_view'), {}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False
