from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Doctor
from clinic.services.accounts import account_payload


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_doctors(request):
    """Doctor directory used by the booking form.

    Query params:
      - specialization: optional exact match (case-insensitive)
    """
    qs = Doctor.objects.order_by('name')
    specialization = (request.query_params.get('specialization') or '').strip()
    if specialization:
        qs = qs.filter(specialization__iexact=specialization)
    return Response([account_payload(d) for d in qs])
