"""
Shared fixtures for the ledger tests.

Wallets are fixed strings; the administrator wallet is injected through
settings for every test so guards see a configured administrator.
"""
import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from ledger.models import User

ADMIN = '0xadmin00000000000000000000000000000000001'
D1 = '0xd0c7000000000000000000000000000000000001'
D2 = '0xd0c7000000000000000000000000000000000002'
D3 = '0xd0c7000000000000000000000000000000000003'
P1 = '0xba7100000000000000000000000000000000000a'
P2 = '0xba7100000000000000000000000000000000000b'
STRANGER = '0x5742000000000000000000000000000000000bad'

DOCTOR_INFO = {
    'name': 'Alice Chen',
    'contact': 'alice@example.org',
    'experience_years': 12,
    'specialty': 'Cardiology',
    'emergency_available': True,
    'available_time': 'Mon-Fri 09:00-17:00',
}
PATIENT_INFO = {
    'conditions': 'hypertension',
    'medications': 'lisinopril',
    'allergies': 'penicillin',
}


@pytest.fixture(scope='session')
def django_db_modify_db_settings(django_db_modify_db_settings_parallel_suffix, tmp_path_factory):
    """Back the SQLite test database with a file so threads share it."""
    from django.conf import settings
    db = settings.DATABASES['default']
    if db['ENGINE'] == 'django.db.backends.sqlite3':
        db.setdefault('TEST', {})['NAME'] = str(tmp_path_factory.mktemp('ledger-db') / 'test.sqlite3')


@pytest.fixture(autouse=True)
def ledger_admin(settings):
    settings.LEDGER_ADMINISTRATOR = ADMIN
    cache.clear()
    return ADMIN


@pytest.fixture
def registry(db):
    """Admin-registered doctors D1, D2, D3 and patients P1, P2."""
    from ledger.services import identities
    for wallet, name in ((D1, 'Alice Chen'), (D2, 'Bob Ortiz'), (D3, 'Carol Smith')):
        identities.register_doctor(ADMIN, wallet, {**DOCTOR_INFO, 'name': name})
    for wallet in (P1, P2):
        identities.register_patient(ADMIN, wallet, PATIENT_INFO)
    return {'doctors': [D1, D2, D3], 'patients': [P1, P2]}


@pytest.fixture
def client_for(db):
    """Return a factory of API clients authenticated as a given wallet."""
    def make(wallet):
        user, _ = User.objects.get_or_create(username=f'u-{wallet[-6:]}', defaults={'wallet': wallet})
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return make
