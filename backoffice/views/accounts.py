"""
User account management (Owner only).

``DELETE`` never removes the row: it disables login and revokes every
token the account holds.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from backoffice.permissions import IsSuperUserLevel
from backoffice.serializers.auth import AccountCreateSerializer, AccountListQuerySerializer, AccountUpdateSerializer
from backoffice.services.accounts import (
    create_account, disable_login, format_account, get_account, list_accounts, update_account,
)
from backoffice.services.audit import log_action


@api_view(['GET', 'POST'])
@permission_classes([IsSuperUserLevel])
def user_accounts(request):
    if request.method == 'GET':
        q = AccountListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        rows = list_accounts(role=vd.get('role'), access_level=vd.get('accessLevel'),
                             q=(vd.get('q') or '').strip() or None)
        return Response({'ok': True, 'data': rows})

    s = AccountCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = create_account(
        name=vd.get('name') or '', email=vd.get('email') or '', password=vd['password'],
        role=vd['role'], access_level=vd['access_level'], source_id=vd.get('source_id'),
    )
    log_action(user=request.user, action='account.create', object_type='user', object_id=user.id,
               detail={'email': user.email, 'role': user.role, 'access_level': user.access_level})
    return Response({'ok': True, 'data': format_account(user)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsSuperUserLevel])
def user_account_detail(request, pk: int):
    user = get_account(pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_account(user)})

    if request.method == 'DELETE':
        disable_login(user, request.user)
        log_action(user=request.user, action='account.disable', object_type='user', object_id=user.id,
                   detail={'email': user.email})
        return Response({'ok': True, 'data': format_account(user)})

    s = AccountUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    update_account(user, request.user, access_level=vd.get('access_level'), name=vd.get('name'),
                   password=vd.get('password'))
    log_action(user=request.user, action='account.update', object_type='user', object_id=user.id,
               detail={'fields': sorted(k for k in vd if k != 'password'), 'passwordChanged': 'password' in vd})
    return Response({'ok': True, 'data': format_account(user)})
