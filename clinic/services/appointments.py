"""
Appointment lifecycle: booking, the doctor's decision queue and approve/reject.

A booked appointment starts ``scheduled``.  The owning doctor moves it to
``approved`` or ``rejected``; source states are not checked, only ownership.
Approval also appends a summary to the doctor's own ``appointments`` list
(once per appointment id).  Rejection leaves that list alone.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from clinic.exceptions import AppointmentForbidden, AppointmentNotFound, DoctorNotFound
from clinic.models import AWAITING_DECISION, Appointment, AppointmentStatus, Doctor, Patient
from clinic.services.audit import log_action
from clinic.services.patients import get_patient

logger = logging.getLogger(__name__)


def appointment_payload(appt: Appointment) -> dict:
    return {
        'id': appt.pk,
        'doctorId': appt.doctor_id,
        'doctorName': appt.doctor_name,
        'department': appt.department,
        'date': appt.date,
        'time': appt.time,
        'reason': appt.reason,
        'status': appt.status,
        'createdAt': appt.created_at.isoformat() if appt.created_at else None,
    }


def _find_doctor(doctor_id) -> Doctor:
    doctor_id = str(doctor_id or '').strip()
    doctor = Doctor.objects.filter(pk=int(doctor_id)).first() if doctor_id.isdigit() else None
    if doctor is None:
        raise DoctorNotFound()
    return doctor


def book_appointment(identity, data: dict) -> Appointment:
    """Book an appointment for the calling patient.

    There is no availability or overlap check; the same slot can be booked
    twice.
    """
    patient = get_patient(identity.id)
    doctor = _find_doctor(data.get('doctorId'))
    appt = Appointment.objects.create(
        patient=patient,
        doctor_id=str(doctor.pk),
        doctor_name=doctor.name,
        department=data.get('department') or doctor.specialization,
        date=data['date'],
        time=data['time'],
        reason=data.get('reason') or '',
        status=AppointmentStatus.SCHEDULED,
    )
    logger.info('appointment %s booked by patient %s with doctor %s', appt.pk, patient.patient_id, doctor.pk)
    log_action(actor=identity, action='appointment_book', object_type='appointment', object_id=appt.pk,
               detail={'doctorId': doctor.pk, 'date': appt.date, 'time': appt.time})
    return appt


def patient_appointments(patient: Patient) -> list[dict]:
    return [appointment_payload(a) for a in patient.appointments.order_by('-created_at')]


def pending_requests(doctor_id) -> list[dict]:
    """Appointments awaiting a decision from this doctor, oldest first."""
    qs = (Appointment.objects
          .filter(doctor_id=str(doctor_id), status__in=AWAITING_DECISION)
          .select_related('patient')
          .order_by('created_at'))
    return [{
        'id': appt.pk,
        'patientId': appt.patient.pk,
        'patientName': appt.patient.name,
        'patientCode': appt.patient.patient_id,
        'date': appt.date,
        'time': appt.time,
        'department': appt.department or 'General',
        'reason': appt.reason,
        'status': appt.status,
    } for appt in qs]


def _lock_owned_appointment(identity, appointment_id) -> Appointment:
    appt = Appointment.objects.select_for_update().filter(pk=str(appointment_id)).first()
    if appt is None:
        raise AppointmentNotFound()
    if appt.doctor_id != str(identity.id):
        raise AppointmentForbidden()
    return appt


def _set_status(appt: Appointment, status: str, **fields) -> None:
    # Field-level update so a concurrent edit of the patient row is not overwritten
    fields.update(status=status, updated_at=timezone.now())
    Appointment.objects.filter(pk=appt.pk).update(**fields)
    for name, value in fields.items():
        setattr(appt, name, value)


def _mirror_entry(appt: Appointment) -> dict:
    return {
        'appointmentId': appt.pk,
        'patientId': appt.patient.pk,
        'patientName': appt.patient.name,
        'date': appt.date,
        'time': appt.time,
        'reason': appt.reason,
        'status': appt.status,
    }


@transaction.atomic
def approve_appointment(identity, appointment_id) -> Appointment:
    appt = _lock_owned_appointment(identity, appointment_id)
    doctor = Doctor.objects.select_for_update().filter(pk=identity.id).first()
    if doctor is None:
        raise DoctorNotFound()
    _set_status(appt, AppointmentStatus.APPROVED, doctor_name=doctor.name)

    mirror = list(doctor.appointments or [])
    if not any(entry.get('appointmentId') == appt.pk for entry in mirror):
        mirror.append(_mirror_entry(appt))
        doctor.appointments = mirror
        doctor.save(update_fields=['appointments'])

    logger.info('appointment %s approved by doctor %s', appt.pk, doctor.pk)
    log_action(actor=identity, action='appointment_approve', object_type='appointment', object_id=appt.pk)
    return appt


@transaction.atomic
def reject_appointment(identity, appointment_id) -> Appointment:
    appt = _lock_owned_appointment(identity, appointment_id)
    _set_status(appt, AppointmentStatus.REJECTED)
    logger.info('appointment %s rejected by doctor %s', appt.pk, identity.id)
    log_action(actor=identity, action='appointment_reject', object_type='appointment', object_id=appt.pk)
    return appt


def doctor_appointments(doctor_id) -> list[dict]:
    doctor = Doctor.objects.filter(pk=doctor_id).only('appointments').first()
    if doctor is None or not isinstance(doctor.appointments, list):
        return []
    return doctor.appointments
