import datetime
from types import SimpleNamespace

import pytest
from django.urls import reverse

from clinic.services import reporting

from .factories import client_for, make_account

TODAY = datetime.date(2026, 6, 15)


def person(**kw):
    kw.setdefault('age', None)
    kw.setdefault('dob', None)
    kw.setdefault('gender', '')
    return SimpleNamespace(**kw)


@pytest.mark.parametrize('dob, expected', [
    (datetime.date(2000, 6, 15), 26),
    (datetime.date(2000, 6, 16), 25),
    (datetime.date(2000, 7, 1), 25),
    (datetime.date(2000, 5, 31), 26),
])
def test_age_is_calendar_accurate(dob, expected):
    assert reporting.age_of(dob, TODAY) == expected


@pytest.mark.parametrize('age, bucket', [
    (0, '0-17'), (17, '0-17'), (18, '18-30'), (30, '18-30'), (31, '31-45'),
    (60, '46-60'), (75, '61-75'), (76, '76+'), (104, '76+'),
])
def test_age_bucket_boundaries(age, bucket):
    assert reporting.age_bucket(age) == bucket


def test_numeric_age_wins_and_dob_is_fallback():
    patients = [
        person(age=25, dob=datetime.date(1950, 1, 1)),
        person(dob=datetime.date(2008, 6, 16)),  # turns 18 tomorrow
        person(age=0, dob='1960-03-02'),
        person(age=''),
        person(),
    ]
    counts = reporting.age_distribution(patients, today=TODAY)
    assert list(counts) == list(reporting.AGE_BUCKETS)
    assert counts == {'0-17': 1, '18-30': 1, '31-45': 0, '46-60': 0, '61-75': 1, '76+': 0}


def test_gender_buckets():
    patients = [person(gender='Male'), person(gender='female'), person(gender='FEMALE'),
                person(gender='non-binary'), person(gender=''), person(gender=None)]
    counts = reporting.gender_distribution(patients)
    assert dict(counts) == {'male': 1, 'female': 2, 'other': 1, 'unknown': 2}


def test_age_bundle_shape():
    bundle = reporting.age_distribution_bundle([person(age=20)], today=TODAY)
    assert bundle['resourceType'] == 'Bundle'
    assert bundle['type'] == 'collection'
    assert len(bundle['entry']) == 6
    obs = bundle['entry'][1]['resource']
    assert obs['code']['coding'][0] == {'system': 'http://loinc.org', 'code': '80977-2',
                                        'display': 'Patient age distribution'}
    assert obs['category'][0]['coding'][0]['code'] == 'survey'
    assert obs['valueQuantity'] == {'value': 1, 'unit': 'patients', 'system': 'http://unitsofmeasure.org',
                                    'code': '{patients}'}
    assert obs['subject'] == {'reference': 'AgeGroup/18-30'}


def test_gender_bundle_uses_gender_code():
    bundle = reporting.gender_distribution_bundle([person(gender='male')])
    obs = bundle['entry'][0]['resource']
    assert obs['code']['coding'][0]['code'] == '76689-9'
    assert obs['subject']['reference'] == 'Gender/male'
    assert [e['resource']['subject']['reference'] for e in bundle['entry']] == [
        'Gender/male', 'Gender/female', 'Gender/other', 'Gender/unknown']


@pytest.mark.django_db
def test_distribution_endpoints_are_admin_or_doctor(doctor, patient, admin_account):
    assert client_for(doctor).get(reverse('age-distribution')).status_code == 200
    r = client_for(admin_account).get(reverse('gender-distribution'))
    assert r.status_code == 200
    assert r.data['entry'][1]['resource']['valueQuantity']['value'] == 1
    denied = client_for(patient).get(reverse('age-distribution'))
    assert denied.status_code == 403
    assert denied.data['error']['message'] == 'Not authorized to access this data'


@pytest.mark.django_db
def test_fhir_patient_projection(doctor):
    p = make_account('patient', 'mary@example.com', name='Mary Ann Smith', gender='Female',
                     phone='555-0100', dob=datetime.date(1990, 4, 5))
    r = client_for(doctor).get(reverse('fhir-patient', args=[p.pk]))
    assert r.status_code == 200
    assert r.data['identifier'] == [{'system': 'http://wellness-dashboard.com/patients', 'value': p.patient_id}]
    assert r.data['name'][0]['family'] == 'Smith'
    assert r.data['name'][0]['given'] == ['Mary', 'Ann']
    assert r.data['gender'] == 'female'
    assert r.data['birthDate'] == '1990-04-05'
    listing = client_for(doctor).get(reverse('fhir-patients'))
    assert listing.data['total'] == 1
