import logging

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class BadRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad request'
    default_code = 'bad_request'


class InvalidCredentials(APIException):
    # Not an AuthenticationFailed: the login view has no authenticators, and
    # DRF would downgrade that to a 403.
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials'
    default_code = 'invalid_credentials'


class AccountNotFound(NotFound):
    default_detail = 'User not found'
    default_code = 'user_not_found'


class PatientNotFound(NotFound):
    default_detail = 'Patient not found'
    default_code = 'patient_not_found'


class DoctorNotFound(NotFound):
    default_detail = 'Doctor not found'
    default_code = 'doctor_not_found'


class AppointmentNotFound(NotFound):
    default_detail = 'Appointment not found'
    default_code = 'appointment_not_found'


class AppointmentForbidden(PermissionDenied):
    default_detail = 'This appointment belongs to another doctor'
    default_code = 'appointment_forbidden'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', view.__class__.__name__ if view else 'view', exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    elif isinstance(resp.data, list) and len(resp.data) == 1:
        detail = resp.data[0]
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', None) or 'api_error'
    if isinstance(detail, str) and hasattr(detail, 'code') and detail.code:
        code = detail.code
    return Response({'ok': False, 'error': {'code': code, 'message': detail}},
                    status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp):
    return {k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if resp.has_header(k)}
