"""
Booking, the doctor's decision queue and approve/reject.

Uses APITestCase so each scenario starts with the same doctor and patient.
"""
from unittest import mock

from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from ..models import Appointment, AppointmentStatus, AuditEvent, Doctor, Patient
from .factories import client_for, make_account


class AppointmentFlowTests(APITestCase):
    def setUp(self) -> None:
        self.doctor = make_account('doctor', 'd1@wellness.com', name='Dr. One', specialization='Cardiology')
        self.other_doctor = make_account('doctor', 'd2@wellness.com', name='Dr. Two')
        self.patient = make_account('patient', 'p1@example.com', name='Pat Ient')
        self.patient_client = client_for(self.patient)
        self.doctor_client = client_for(self.doctor)

    def book(self, **overrides):
        body = {'doctorId': str(self.doctor.pk), 'date': '2026-11-02', 'time': '10:00', 'reason': 'checkup'}
        body.update(overrides)
        return self.patient_client.post(reverse('book-appointment'), body, format='json')

    def test_booking_starts_scheduled_and_defaults_department(self):
        r = self.book()
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        appt = Appointment.objects.get(pk=r.data['appointment']['id'])
        self.assertEqual(appt.status, AppointmentStatus.SCHEDULED)
        self.assertEqual(appt.department, 'Cardiology')
        self.assertEqual(appt.doctor_name, 'Dr. One')

    def test_booking_requires_date_time_and_doctor(self):
        r = self.patient_client.post(reverse('book-appointment'), {'doctorId': str(self.doctor.pk)}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_booking_unknown_doctor_is_404(self):
        r = self.book(doctorId='99999')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data['error']['message'], 'Doctor not found')

    def test_double_booking_is_allowed(self):
        self.assertEqual(self.book().status_code, 201)
        self.assertEqual(self.book().status_code, 201)
        self.assertEqual(Appointment.objects.filter(doctor_id=str(self.doctor.pk)).count(), 2)

    def test_doctor_cannot_book(self):
        r = self.doctor_client.post(reverse('book-appointment'), {
            'doctorId': str(self.doctor.pk), 'date': '2026-11-02', 'time': '10:00',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_my_appointments_lists_only_own(self):
        self.book()
        someone_else = make_account('patient', 'p2@example.com')
        client_for(someone_else).post(reverse('book-appointment'), {
            'doctorId': str(self.doctor.pk), 'date': '2026-11-03', 'time': '09:00',
        }, format='json')
        r = self.patient_client.get(reverse('my-appointments'))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.data), 1)
        self.assertEqual(r.data[0]['date'], '2026-11-02')

    def test_pending_requests_include_legacy_pending_only_for_caller(self):
        self.book()
        Appointment.objects.create(patient=self.patient, doctor_id=str(self.doctor.pk), date='2026-11-04',
                                   time='11:00', status=AppointmentStatus.PENDING)
        Appointment.objects.create(patient=self.patient, doctor_id=str(self.doctor.pk), date='2026-11-05',
                                   time='11:00', status=AppointmentStatus.APPROVED)
        Appointment.objects.create(patient=self.patient, doctor_id=str(self.other_doctor.pk), date='2026-11-06',
                                   time='11:00')
        r = self.doctor_client.get(reverse('appointment-requests'))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.data), 2)
        self.assertEqual({row['status'] for row in r.data}, {'scheduled', 'Pending'})
        by_status = {row['status']: row for row in r.data}
        self.assertEqual(by_status['scheduled']['patientName'], 'Pat Ient')
        self.assertEqual(by_status['scheduled']['patientCode'], self.patient.patient_id)
        self.assertEqual(by_status['scheduled']['department'], 'Cardiology')
        self.assertEqual(by_status['Pending']['department'], 'General')

    def test_approve_twice_appends_mirror_once(self):
        appt_id = self.book().data['appointment']['id']
        url = reverse('approve-appointment', args=[appt_id])
        self.assertEqual(self.doctor_client.put(url).status_code, 200)
        self.assertEqual(self.doctor_client.put(url).status_code, 200)

        self.assertEqual(Appointment.objects.get(pk=appt_id).status, AppointmentStatus.APPROVED)
        self.doctor.refresh_from_db()
        self.assertEqual(len(self.doctor.appointments), 1)
        entry = self.doctor.appointments[0]
        self.assertEqual(entry['appointmentId'], appt_id)
        self.assertEqual(entry['patientId'], self.patient.pk)
        self.assertEqual(entry['status'], 'approved')

        r = self.doctor_client.get(reverse('doctor-appointments'))
        self.assertEqual(r.data, self.doctor.appointments)

    def test_approve_touches_only_the_target_appointment(self):
        first = self.book().data['appointment']['id']
        second = self.book(time='11:00').data['appointment']['id']
        self.doctor_client.put(reverse('approve-appointment', args=[first]))
        self.assertEqual(Appointment.objects.get(pk=second).status, AppointmentStatus.SCHEDULED)

    def test_approval_survives_a_failed_audit_write(self):
        appt_id = self.book().data['appointment']['id']
        audit_rows = AuditEvent.objects.count()
        with mock.patch.object(AuditEvent.objects, 'create', side_effect=DatabaseError('audit table unavailable')):
            r = self.doctor_client.put(reverse('approve-appointment', args=[appt_id]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(Appointment.objects.get(pk=appt_id).status, AppointmentStatus.APPROVED)
        self.doctor.refresh_from_db()
        self.assertEqual(len(self.doctor.appointments), 1)
        self.assertEqual(AuditEvent.objects.count(), audit_rows)

    def test_reject_leaves_mirror_untouched(self):
        appt_id = self.book().data['appointment']['id']
        r = self.doctor_client.put(reverse('reject-appointment', args=[appt_id]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(Appointment.objects.get(pk=appt_id).status, AppointmentStatus.REJECTED)
        self.doctor.refresh_from_db()
        self.assertEqual(self.doctor.appointments, [])

    def test_other_doctor_cannot_decide(self):
        appt_id = self.book().data['appointment']['id']
        client = client_for(self.other_doctor)
        self.assertEqual(client.put(reverse('approve-appointment', args=[appt_id])).status_code, 403)
        self.assertEqual(client.put(reverse('reject-appointment', args=[appt_id])).status_code, 403)
        self.assertEqual(Appointment.objects.get(pk=appt_id).status, AppointmentStatus.SCHEDULED)

    def test_unknown_appointment_is_404(self):
        r = self.doctor_client.put(reverse('approve-appointment', args=['does-not-exist']))
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data['error']['message'], 'Appointment not found')

    def test_deleted_doctor_credential_is_rejected(self):
        Doctor.objects.filter(pk=self.doctor.pk).delete()
        r = self.doctor_client.get(reverse('appointment-requests'))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.data['error']['message'], 'Doctor account no longer exists')

    def test_deleting_patient_removes_their_appointments(self):
        self.book()
        Patient.objects.filter(pk=self.patient.pk).delete()
        self.assertFalse(Appointment.objects.exists())

    def test_doctor_directory_hides_passwords(self):
        r = self.patient_client.get(reverse('doctors'))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.data), 2)
        self.assertTrue(all('password' not in d for d in r.data))
