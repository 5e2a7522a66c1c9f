from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction

from clinic.exceptions import BadRequest, PatientNotFound
from clinic.models import Account, Patient
from clinic.services.accounts import email_in_use, register_account, update_password

logger = logging.getLogger(__name__)

DEMOGRAPHIC_FIELDS = ('name', 'age', 'dob', 'gender', 'phone', 'address')


def patient_payload(patient: Patient, *, with_appointments: bool = True) -> dict:
    data = {
        'id': patient.pk,
        'patientId': patient.patient_id,
        'email': patient.email,
        'name': patient.name,
        'role': patient.role,
        'age': patient.age,
        'dob': patient.dob.isoformat() if patient.dob else None,
        'gender': patient.gender,
        'phone': patient.phone,
        'address': patient.address,
        'medicalHistory': patient.medical_history,
        'prescriptions': patient.prescriptions,
        'hasPrescriptionPdf': bool(patient.prescription_pdf),
    }
    if with_appointments:
        from clinic.services.appointments import appointment_payload
        data['appointments'] = [appointment_payload(a) for a in patient.appointments.order_by('created_at')]
    return data


def get_patient(pk) -> Patient:
    patient = Patient.objects.filter(pk=pk).first()
    if patient is None:
        raise PatientNotFound()
    return patient


def visible_patients(identity):
    """Admins and doctors see every patient; a patient sees only themselves."""
    qs = Patient.objects.order_by('patient_id')
    if identity.role == 'patient':
        qs = qs.filter(pk=identity.id)
    return qs


def create_patient(actor, data: dict) -> tuple[Patient, Optional[str]]:
    """Create a patient record on behalf of a doctor.

    A password is generated when none is supplied; the caller returns it once
    so it can be handed to the patient.
    """
    extra = {k: data.get(k) for k in DEMOGRAPHIC_FIELDS if k != 'name'}
    extra['medical_history'] = data.get('medical_history') or []
    extra['prescriptions'] = data.get('prescriptions') or []
    patient, initial_password = register_account(
        'patient',
        email=data.get('email') or '',
        password=data.get('password') or None,
        name=data.get('name') or '',
        generate_password=True,
        **extra,
    )
    logger.info('patient %s created by %s', patient.patient_id, actor)
    return patient, initial_password


@transaction.atomic
def update_patient(pk, data: dict) -> Patient:
    """Apply a doctor's edit.

    ``prescriptions`` is replaced wholesale on every update; omitting it
    clears the list.
    """
    patient = Patient.objects.select_for_update().filter(pk=pk).first()
    if patient is None:
        raise PatientNotFound()
    changed = []
    if data.get('email'):
        email = Account.normalize_email(data['email'])
        if email != patient.email:
            if email_in_use(email):
                raise BadRequest('User already exists')
            patient.email = email
            changed.append('email')
    for field in DEMOGRAPHIC_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if value is None and field not in ('age', 'dob'):
            value = ''
        setattr(patient, field, value)
        changed.append(field)
    if 'medical_history' in data:
        patient.medical_history = data['medical_history']
        changed.append('medical_history')
    patient.prescriptions = data.get('prescriptions') or []
    changed.append('prescriptions')
    if update_password(patient, data.get('password')):
        changed.append('password')
    patient.save(update_fields=changed)
    return patient


def delete_patient(pk) -> Patient:
    patient = get_patient(pk)
    patient.delete()
    return patient


@transaction.atomic
def set_prescription(pk, document: dict) -> Patient:
    patient = Patient.objects.select_for_update().filter(pk=pk).first()
    if patient is None:
        raise PatientNotFound()
    pdf = document.pop('pdf', None)
    patient.prescription = document
    fields = ['prescription']
    if pdf is not None:
        patient.prescription_pdf = pdf
        fields.append('prescription_pdf')
    patient.save(update_fields=fields)
    return patient
