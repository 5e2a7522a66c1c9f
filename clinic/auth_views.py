"""
Registration, login and profile endpoints.

Login looks the email up in the table for the requested role only and
answers every failure with the same "Invalid credentials" message, so the
response never tells which of email or password was wrong.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from clinic.exceptions import InvalidCredentials
from clinic.serializers.auth import LoginSerializer, RegisterSerializer
from clinic.services import accounts
from clinic.services.audit import log_action
from clinic.tokens import issue_credential

logger = logging.getLogger(__name__)


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    extra = {}
    if vd['role'] == 'doctor':
        extra = {
            'specialization': vd.get('specialization') or '',
            'experience': vd.get('experience'),
            'contact_number': vd.get('contactNumber'),
        }
    account, _ = accounts.register_account(
        vd['role'], email=vd['email'], password=vd['password'], name=vd['name'], **extra
    )
    log_action(actor=account, action='register', object_type=account.role, object_id=account.pk)
    payload = {'ok': True, 'message': 'User registered successfully', 'id': account.pk, 'role': account.role}
    if vd['role'] == 'patient':
        payload['patientId'] = account.patient_id
    return Response(payload, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """Exchange email, password and role for a 24 hour credential."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    account = accounts.authenticate(vd['role'], vd['email'], vd['password'])
    if account is None:
        log_action(action='login', object_type=vd['role'],
                   detail={'result': 'fail', 'email': vd['email'], 'ip': request.META.get('REMOTE_ADDR')})
        raise InvalidCredentials()

    token = issue_credential(account)
    log_action(actor=account, action='login', object_type=account.role, object_id=account.pk,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    logger.info('login ok: %s id=%s', account.role, account.pk)

    return Response({
        'ok': True,
        'token': str(token),
        'user': {
            'id': account.pk,
            'email': account.email,
            'role': account.role,
            'userType': account.role,
            'name': account.name,
        },
        'expiresAt': token['exp'],
    }, status=200)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile_view(request):
    """Return the caller's own account from the table named by their role."""
    identity = request.user
    account = accounts.get_account(identity.role, identity.id)
    return Response(accounts.account_payload(account))
