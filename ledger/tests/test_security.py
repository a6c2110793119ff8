from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.urls import reverse
from rest_framework.test import APIClient

from ledger.models import User
from ledger.services import identities

from .conftest import ADMIN, D1, DOCTOR_INFO, P1

pytestmark = pytest.mark.django_db


def login(client, account, password, **extra):
    return client.post(reverse('login_view'), {'account': account, 'password': password, **extra}, format='json')


def test_login_returns_jwt_and_legacy_token():
    User.objects.create_user(username='u_jwt', password='P@ssw0rd1', wallet=P1)
    r = login(APIClient(), 'u_jwt', 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['token']
    assert r.data['jwt_access'] and r.data['jwt_refresh']
    assert r.data['user']['wallet'] == P1


def test_login_by_wallet_reports_ledger_roles(registry):
    User.objects.create_user(username='doc', password='P@ssw0rd1', wallet=D1)
    r = login(APIClient(), D1, 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['user']['username'] == 'doc'
    assert r.data['user']['roles'] == ['doctor']


def test_login_ignores_claimed_roles():
    User.objects.create_user(username='u1', password='P@ssw0rd1', wallet=P1)
    r = login(APIClient(), 'u1', 'P@ssw0rd1', role='administrator', roles=['administrator'])
    assert r.status_code == 200
    assert r.data['user']['roles'] == []


def test_login_rejects_bad_password():
    User.objects.create_user(username='u1', password='P@ssw0rd1', wallet=P1)
    r = login(APIClient(), 'u1', 'wrong')
    assert r.status_code == 400
    assert r.data['ok'] is False
    r = APIClient().post(reverse('login_view'), {'password': 'P@ssw0rd1'}, format='json')
    assert r.status_code == 400


def test_legacy_token_and_jwt_authenticate_ledger_calls(registry):
    User.objects.create_user(username='patient', password='P@ssw0rd1', wallet=P1)
    r = login(APIClient(), 'patient', 'P@ssw0rd1')

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert client.get('/api/patient/me').status_code == 200

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    assert client.get('/api/patient/me').status_code == 200

    assert APIClient().get('/api/patient/me').status_code == 401


def test_jwt_refresh_and_logout():
    User.objects.create_user(username='u1', password='P@ssw0rd1', wallet=P1)
    r = login(APIClient(), 'u1', 'P@ssw0rd1')
    refresh = r.data['jwt_refresh']

    client = APIClient()
    resp = client.post('/api/auth/refresh', {'refresh': refresh}, format='json')
    assert resp.status_code == 200
    assert resp.data['jwt_access']

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    resp = client.post('/api/auth/logout', {}, format='json')
    assert resp.status_code == 200
    assert resp.data['blacklisted'] >= 1
    resp = APIClient().post('/api/auth/refresh', {'refresh': refresh}, format='json')
    assert resp.status_code == 401


def test_guards_follow_configured_administrator(settings):
    identities.register_doctor(ADMIN, D1, DOCTOR_INFO)
    settings.LEDGER_ADMINISTRATOR = P1
    user = User.objects.create_user(username='old-admin', password='P@ssw0rd1', wallet=ADMIN)
    client = APIClient()
    client.force_authenticate(user=user)
    r = client.post('/api/patients/register', {'wallet': P1}, format='json')
    assert r.status_code == 403


def test_ensure_ledger_users_command(settings):
    out = StringIO()
    call_command('ensure_ledger_users', '--demo', '--password', 'S3cret!pw', stdout=out)
    admin = User.objects.get(username='ledger-admin')
    assert admin.wallet == ADMIN and admin.is_staff
    assert admin.check_password('S3cret!pw')
    assert User.objects.get(username='doctor1').wallet == D1
    assert User.objects.get(username='patient1').wallet == P1
    # idempotent
    call_command('ensure_ledger_users', stdout=out)
    assert User.objects.filter(username='ledger-admin').count() == 1

    settings.LEDGER_ADMINISTRATOR = ''
    with pytest.raises(CommandError):
        call_command('ensure_ledger_users', stdout=out)


def test_ensure_ledger_users_rerun_keeps_existing_password():
    out = StringIO()
    call_command('ensure_ledger_users', '--password', 'Str0ng!Secret', stdout=out)
    call_command('ensure_ledger_users', stdout=out)
    admin = User.objects.get(username='ledger-admin')
    assert admin.check_password('Str0ng!Secret')
    assert not admin.check_password('123456')

    call_command('ensure_ledger_users', '--password', 'N3w!Secret', stdout=out)
    admin.refresh_from_db()
    assert admin.check_password('N3w!Secret')


def test_ensure_ledger_users_generates_initial_password():
    out = StringIO()
    call_command('ensure_ledger_users', stdout=out)
    admin = User.objects.get(username='ledger-admin')
    assert admin.has_usable_password()
    assert 'initial password: ' in out.getvalue()
    generated = out.getvalue().split('initial password: ')[1].split()[0]
    assert admin.check_password(generated)
    assert not admin.check_password('123456')
