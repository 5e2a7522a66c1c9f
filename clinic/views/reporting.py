"""
Demographic summaries and the read-only FHIR Patient projection.

All of these are reads over the patient table and are limited to admins and
doctors.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from clinic.models import Patient
from clinic.permissions import IsAdminOrDoctor
from clinic.services import reporting
from clinic.services.patients import get_patient


@api_view(['GET'])
@permission_classes([IsAdminOrDoctor])
def age_distribution(request):
    patients = Patient.objects.only('age', 'dob')
    return Response(reporting.age_distribution_bundle(patients))


@api_view(['GET'])
@permission_classes([IsAdminOrDoctor])
def gender_distribution(request):
    patients = Patient.objects.only('gender')
    return Response(reporting.gender_distribution_bundle(patients))


@api_view(['GET'])
@permission_classes([IsAdminOrDoctor])
def fhir_patients(request):
    entries = [{'resource': reporting.fhir_patient(p)} for p in Patient.objects.order_by('patient_id')]
    return Response({'resourceType': 'Bundle', 'type': 'searchset', 'total': len(entries), 'entry': entries})


@api_view(['GET'])
@permission_classes([IsAdminOrDoctor])
def fhir_patient_detail(request, pk: int):
    return Response(reporting.fhir_patient(get_patient(pk)))
