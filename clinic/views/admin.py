"""
Administration endpoints: account listing, per-account edit and delete, and
the user counts shown on the admin dashboard.

The ``role`` path segment selects which of the three account tables the
primary key refers to.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from clinic.permissions import IsAdminRole
from clinic.serializers.auth import AccountUpdateSerializer
from clinic.services import accounts
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def list_users(request):
    return Response(accounts.all_accounts())


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAdminRole])
def user_detail(request, role: str, pk: int):
    identity = request.user
    if request.method == 'GET':
        return Response(accounts.account_payload(accounts.get_account(role, pk)))

    if request.method == 'PUT':
        account = accounts.get_account(role, pk)
        s = AccountUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        account = accounts.update_account(account, s.validated_data)
        log_action(actor=identity, action='account_update', object_type=account.role, object_id=account.pk,
                   detail={'fields': sorted(s.validated_data)})
        return Response(accounts.account_payload(account))

    # DELETE
    account = accounts.delete_account(role, pk)
    logger.info('admin %s deleted %s id=%s', identity.id, account.role, pk)
    log_action(actor=identity, action='account_delete', object_type=account.role, object_id=pk,
               detail={'email': account.email})
    return Response({'ok': True, 'message': 'User deleted successfully'})


@api_view(['GET'])
@permission_classes([IsAdminRole])
def stats(request):
    return Response(accounts.user_counts())
