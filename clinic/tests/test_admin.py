import pytest
from django.test import override_settings
from django.urls import reverse

from clinic.models import Admin, Doctor

from .factories import client_for, make_account

pytestmark = pytest.mark.django_db


def test_stats_counts_every_table():
    admin = make_account('admin', 'a1@wellness.com')
    make_account('admin', 'a2@wellness.com')
    for i in range(3):
        make_account('doctor', f'd{i}@wellness.com')
    for i in range(5):
        make_account('patient', f'p{i}@example.com')
    r = client_for(admin).get(reverse('admin-stats'))
    assert r.status_code == 200
    assert r.data == {'totalUsers': 10, 'admins': 2, 'doctors': 3, 'patients': 5}


def test_admin_routes_reject_other_roles(doctor, patient):
    for account in (doctor, patient):
        r = client_for(account).get(reverse('admin-users'))
        assert r.status_code == 403
        assert r.data['error']['message'] == 'Access denied. Admin privileges required.'


def test_list_users_tags_roles_without_passwords(admin_account, doctor, patient):
    r = client_for(admin_account).get(reverse('admin-users'))
    assert r.status_code == 200
    assert sorted(u['role'] for u in r.data) == ['admin', 'doctor', 'patient']
    assert all('password' not in u for u in r.data)


def test_update_never_touches_password_or_role(admin_account, doctor):
    before = Doctor.objects.get(pk=doctor.pk).password
    url = reverse('admin-user-detail', args=['doctor', doctor.pk])
    r = client_for(admin_account).put(url, {
        'name': 'Dr. Renamed', 'specialization': 'Neurology', 'password': 'hijack123', 'role': 'admin',
    }, format='json')
    assert r.status_code == 200
    assert r.data['name'] == 'Dr. Renamed'
    assert r.data['role'] == 'doctor'
    stored = Doctor.objects.get(pk=doctor.pk)
    assert stored.specialization == 'Neurology'
    assert stored.password == before


def test_unknown_role_and_missing_account(admin_account):
    client = client_for(admin_account)
    assert client.get(reverse('admin-user-detail', args=['nurse', 1])).status_code == 400
    assert client.get(reverse('admin-user-detail', args=['doctor', 999])).status_code == 404


def test_delete_account(admin_account, doctor):
    client = client_for(admin_account)
    url = reverse('admin-user-detail', args=['doctor', doctor.pk])
    assert client.delete(url).status_code == 200
    assert not Doctor.objects.filter(pk=doctor.pk).exists()


def test_missing_admin_account_is_tolerated_by_default(admin_account):
    client = client_for(admin_account)
    Admin.objects.filter(pk=admin_account.pk).delete()
    assert client.get(reverse('admin-stats')).status_code == 200


@override_settings(STRICT_ADMIN_EXISTENCE_CHECK=True)
def test_missing_admin_account_rejected_in_strict_mode(admin_account):
    client = client_for(admin_account)
    Admin.objects.filter(pk=admin_account.pk).delete()
    assert client.get(reverse('admin-stats')).status_code == 403


def test_healthz_reports_database(client):
    r = client.get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}
