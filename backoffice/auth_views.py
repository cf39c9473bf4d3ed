"""
Authentication views.

Login accepts a username or an email address and returns both a legacy
DRF token (``Authorization: Token <key>``) and a SimpleJWT pair.  The
authentication classes themselves live in ``backoffice.authentication``
so settings can import them without pulling in view code.
"""
from __future__ import annotations

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from .access import build_menu, security_level
from .models import Doctor, Employee, User
from .serializers.auth import LoginSerializer, RegisterSerializer, VerifyUserSerializer
from .services.accounts import register_login, verify_user
from .services.audit import log_action
from .services.clinic import page_access_overrides


def _username_for(login: str) -> str:
    if '@' not in login:
        return login
    user = User.objects.filter(email__iexact=login).order_by('-is_active', 'id').first()
    return user.username if user else login


def user_payload(user: User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'name': user.display_name,
        'email': user.email,
        'role': user.role,
        'accessLevel': user.access_level,
        'securityLevel': security_level(user),
        'doctorId': user.doctor_id,
        'employeeId': user.employee_id,
    }


def _session(user: User) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'user': user_payload(user),
        'accessLevel': user.access_level,
        'menu': build_menu(user, page_access_overrides()),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """Username/email + password login."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    login = s.validated_data['login']
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=_username_for(login), password=s.validated_data['password'])
    if not user:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'login': login, 'ip': ip})
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                'message': 'Username/email atau password salah'}},
                        status=status.HTTP_400_BAD_REQUEST)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})
    return Response(_session(user), status=status.HTTP_200_OK)

# ScopedRateThrottle reads throttle_scope from the view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def verify_user_view(request):
    """Check that an email belongs to an active doctor or employee."""
    s = VerifyUserSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    found = verify_user(s.validated_data['email'])
    if not found['found']:
        return Response({'ok': False, 'needsRegistration': True,
                         'error': {'code': 'permission_denied',
                                   'message': 'Email tidak terdaftar sebagai dokter atau karyawan aktif'}},
                        status=status.HTTP_403_FORBIDDEN)
    return Response({'ok': True, **found})

verify_user_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    """Self sign-up for a doctor or employee already on file."""
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    found = verify_user(vd['email'])
    if not found['found'] or found['userType'] != vd['role']:
        raise PermissionDenied('Email tidak terdaftar sebagai dokter atau karyawan aktif')
    doctor = Doctor.objects.get(pk=found['id']) if found['userType'] == 'doctor' else None
    employee = Employee.objects.get(pk=found['id']) if found['userType'] == 'employee' else None
    user = register_login(email=vd['email'], password=vd['password'], name=vd['name'] or found['name'],
                          role=vd['role'], doctor=doctor, employee=employee)
    log_action(user=user, action='register', object_type='user', object_id=user.id,
               detail={'role': user.role, 'ip': request.META.get('REMOTE_ADDR')})
    return Response(_session(user), status=status.HTTP_201_CREATED)

register_view.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    user = request.user
    return Response({'ok': True, 'user': user_payload(user), 'accessLevel': user.access_level,
                     'menu': build_menu(user, page_access_overrides())})


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token (and a rotated refresh token) from a refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    data = dict(s.validated_data)
    payload = {'ok': True, 'jwt_access': data['access']}
    if 'refresh' in data:
        payload['jwt_refresh'] = data['refresh']
    return Response(payload)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token (or all of them) and drop the legacy token."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            raise InvalidToken(e.args[0])
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
