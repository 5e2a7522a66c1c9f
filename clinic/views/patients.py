"""
Patient record views.

Admins and doctors may list every patient; a patient only ever sees their
own record.  Creating and editing records, and writing prescriptions, is
reserved to doctors.  Deletion is a hard delete available to doctors and
admins.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import IsAdminOrDoctor, IsDoctorRole, enforce
from clinic.serializers.patient import PatientWriteSerializer, PrescriptionDocumentSerializer
from clinic.services import patients as patient_svc
from clinic.services.accounts import preview_next_patient_id
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)


def _check_own_record(identity, patient) -> None:
    if identity.role == 'patient' and str(patient.pk) != str(identity.id):
        raise PermissionDenied('Access denied')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients_collection(request):
    identity = request.user
    if request.method == 'GET':
        if identity.role not in ('admin', 'doctor', 'patient'):
            raise PermissionDenied('Access denied')
        qs = patient_svc.visible_patients(identity)
        return Response([patient_svc.patient_payload(p, with_appointments=False) for p in qs])

    # POST
    enforce(request, IsDoctorRole)
    s = PatientWriteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient, initial_password = patient_svc.create_patient(identity, s.validated_data)
    log_action(actor=identity, action='patient_create', object_type='patient', object_id=patient.pk)
    payload = patient_svc.patient_payload(patient)
    if initial_password:
        payload['initialPassword'] = initial_password
    return Response(payload, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def next_patient_id(request):
    """Preview the identifier the next registration will receive."""
    return Response({'nextId': preview_next_patient_id()})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    identity = request.user
    if request.method == 'GET':
        patient = patient_svc.get_patient(pk)
        _check_own_record(identity, patient)
        return Response(patient_svc.patient_payload(patient))

    if request.method == 'PUT':
        enforce(request, IsDoctorRole)
        s = PatientWriteSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        patient = patient_svc.update_patient(pk, s.validated_data)
        log_action(actor=identity, action='patient_update', object_type='patient', object_id=patient.pk)
        return Response(patient_svc.patient_payload(patient))

    # DELETE
    enforce(request, IsAdminOrDoctor)
    patient = patient_svc.delete_patient(pk)
    logger.info('patient %s deleted by %s', patient.patient_id, identity)
    log_action(actor=identity, action='patient_delete', object_type='patient', object_id=pk,
               detail={'patientId': patient.patient_id, 'email': patient.email})
    return Response({'ok': True, 'message': 'Patient deleted successfully'})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patient_prescription(request, pk: int):
    identity = request.user
    if request.method == 'GET':
        patient = patient_svc.get_patient(pk)
        _check_own_record(identity, patient)
        return Response(patient.prescription or {})

    enforce(request, IsDoctorRole)
    s = PrescriptionDocumentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    document = dict(s.validated_data)
    document['doctorId'] = identity.id
    document['doctorName'] = identity.name
    patient = patient_svc.set_prescription(pk, document)
    log_action(actor=identity, action='prescription_write', object_type='patient', object_id=patient.pk)
    return Response({'ok': True, 'message': 'Prescription generated successfully',
                     'prescription': patient.prescription})
