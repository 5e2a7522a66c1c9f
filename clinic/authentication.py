"""
Bearer credential authentication.

Built on simplejwt's stateless authentication so no account lookup happens
here; existence checks belong to the role guards.  A missing header leaves
the request anonymous (401 from the permission layer), a malformed header is
a 401, and a credential that fails signature or expiry checks is a 403.
"""
from __future__ import annotations

import logging

from rest_framework.exceptions import PermissionDenied
from rest_framework_simplejwt.authentication import JWTStatelessUserAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

# Role tags a credential may carry; each names one account table
CREDENTIAL_ROLES = ('admin', 'doctor', 'patient')

logger = logging.getLogger(__name__)


class InvalidCredential(PermissionDenied):
    default_detail = 'Invalid or expired token'
    default_code = 'invalid_token'


class BearerTokenAuthentication(JWTStatelessUserAuthentication):
    """Authenticate ``Authorization: Bearer <credential>`` headers."""

    def get_validated_token(self, raw_token):
        try:
            return AccessToken(raw_token)
        except TokenError as exc:
            logger.info('rejected credential: %s', exc)
            raise InvalidCredential()

    def get_user(self, validated_token):
        if not str(validated_token.get(api_settings.USER_ID_CLAIM, '')).isdigit():
            raise InvalidCredential()
        if validated_token.get('role') not in CREDENTIAL_ROLES:
            raise InvalidCredential()
        return api_settings.TOKEN_USER_CLASS(validated_token)
