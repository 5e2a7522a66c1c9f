"""
Read-only demographic summaries over all patients, shaped as FHIR-like
bundles of Observation entries.

The bundle layout is consumed structurally by the dashboard charts, so the
keys, codes and entry order here are fixed.
"""
from __future__ import annotations

import datetime
from collections import OrderedDict
from typing import Iterable, Optional

AGE_BUCKETS = ('0-17', '18-30', '31-45', '46-60', '61-75', '76+')
_AGE_UPPER_BOUNDS = (17, 30, 45, 60, 75)
GENDER_BUCKETS = ('male', 'female', 'other', 'unknown')

CATEGORY_SYSTEM = 'http://terminology.hl7.org/CodeSystem/observation-category'
LOINC_SYSTEM = 'http://loinc.org'
UCUM_SYSTEM = 'http://unitsofmeasure.org'
AGE_CODE = ('80977-2', 'Patient age distribution')
GENDER_CODE = ('76689-9', 'Patient gender distribution')

PATIENT_IDENTIFIER_SYSTEM = 'http://wellness-dashboard.com/patients'


def age_of(dob: datetime.date, today: datetime.date) -> int:
    """Whole years between ``dob`` and ``today``."""
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def age_bucket(age: int) -> str:
    for label, upper in zip(AGE_BUCKETS, _AGE_UPPER_BOUNDS):
        if age <= upper:
            return label
    return AGE_BUCKETS[-1]


def _numeric_age(value) -> Optional[int]:
    # Zero and blank ages count as missing
    if value in (None, '', 0):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _parse_dob(value) -> Optional[datetime.date]:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def age_distribution(patients: Iterable, today: Optional[datetime.date] = None) -> 'OrderedDict[str, int]':
    """Count patients per age bucket.

    A usable numeric ``age`` wins; otherwise the age is derived from ``dob``.
    Patients with neither are left out of every bucket.
    """
    today = today or datetime.date.today()
    counts = OrderedDict((label, 0) for label in AGE_BUCKETS)
    for p in patients:
        age = _numeric_age(getattr(p, 'age', None))
        if age is None:
            dob = _parse_dob(getattr(p, 'dob', None))
            if dob is None:
                continue
            age = age_of(dob, today)
        counts[age_bucket(age)] += 1
    return counts


def gender_distribution(patients: Iterable) -> 'OrderedDict[str, int]':
    counts = OrderedDict((label, 0) for label in GENDER_BUCKETS)
    for p in patients:
        gender = (getattr(p, 'gender', None) or '').lower()
        if gender in ('male', 'female'):
            counts[gender] += 1
        elif gender:
            counts['other'] += 1
        else:
            counts['unknown'] += 1
    return counts


def observation_bundle(counts, *, code: tuple[str, str], subject_prefix: str) -> dict:
    loinc_code, display = code
    return {
        'resourceType': 'Bundle',
        'type': 'collection',
        'entry': [{
            'resource': {
                'resourceType': 'Observation',
                'category': [{
                    'coding': [{
                        'system': CATEGORY_SYSTEM,
                        'code': 'survey',
                        'display': 'Survey',
                    }]
                }],
                'code': {
                    'coding': [{
                        'system': LOINC_SYSTEM,
                        'code': loinc_code,
                        'display': display,
                    }]
                },
                'valueQuantity': {
                    'value': value,
                    'unit': 'patients',
                    'system': UCUM_SYSTEM,
                    'code': '{patients}',
                },
                'subject': {
                    'reference': f'{subject_prefix}/{label}',
                },
            }
        } for label, value in counts.items()],
    }


def age_distribution_bundle(patients, today=None) -> dict:
    return observation_bundle(age_distribution(patients, today), code=AGE_CODE, subject_prefix='AgeGroup')


def gender_distribution_bundle(patients) -> dict:
    return observation_bundle(gender_distribution(patients), code=GENDER_CODE, subject_prefix='Gender')


def fhir_patient(patient) -> dict:
    """Project a stored patient into a FHIR Patient resource."""
    parts = (patient.name or '').split()
    family = parts[-1] if parts else ''
    given = parts[:-1]
    return {
        'resourceType': 'Patient',
        'id': str(patient.pk),
        'identifier': [{
            'system': PATIENT_IDENTIFIER_SYSTEM,
            'value': patient.patient_id,
        }],
        'active': True,
        'name': [{
            'use': 'official',
            'family': family,
            'given': given,
        }],
        'telecom': [
            {'system': 'phone', 'value': patient.phone or '', 'use': 'home'},
            {'system': 'email', 'value': patient.email or '', 'use': 'work'},
        ],
        'gender': patient.gender.lower() if patient.gender else 'unknown',
        'birthDate': patient.dob.isoformat() if patient.dob else '',
        'address': [{
            'use': 'home',
            'line': [patient.address or ''],
            'city': '',
            'state': '',
            'postalCode': '',
            'country': '',
        }],
    }
