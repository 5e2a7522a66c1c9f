"""
Appointment endpoints for both sides of a booking.

Patients book and list their own appointments; doctors see the requests
awaiting their decision and approve or reject them.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from clinic.permissions import IsDoctorRole, IsPatientRole
from clinic.serializers.appointment import BookAppointmentSerializer
from clinic.services import appointments as appt_svc
from clinic.services.patients import get_patient


@api_view(['POST'])
@permission_classes([IsPatientRole])
def book_appointment(request):
    s = BookAppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = appt_svc.book_appointment(request.user, s.validated_data)
    return Response({'ok': True, 'message': 'Appointment booked successfully',
                     'appointment': appt_svc.appointment_payload(appt)},
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsPatientRole])
def my_appointments(request):
    patient = get_patient(request.user.id)
    return Response(appt_svc.patient_appointments(patient))


@api_view(['GET'])
@permission_classes([IsDoctorRole])
def appointment_requests(request):
    """Appointments still waiting for this doctor's decision."""
    return Response(appt_svc.pending_requests(request.user.id))


@api_view(['PUT'])
@permission_classes([IsDoctorRole])
def approve_appointment(request, appointment_id: str):
    appt = appt_svc.approve_appointment(request.user, appointment_id)
    return Response({'ok': True, 'message': 'Appointment approved',
                     'appointment': appt_svc.appointment_payload(appt)})


@api_view(['PUT'])
@permission_classes([IsDoctorRole])
def reject_appointment(request, appointment_id: str):
    appt = appt_svc.reject_appointment(request.user, appointment_id)
    return Response({'ok': True, 'message': 'Appointment rejected',
                     'appointment': appt_svc.appointment_payload(appt)})


@api_view(['GET'])
@permission_classes([IsDoctorRole])
def doctor_appointments(request):
    return Response(appt_svc.doctor_appointments(request.user.id))
