"""
Login accounts for doctors and employees.

An account is a :class:`backoffice.models.User` linked to at most one
doctor or employee record.  Disabling login keeps the row (``is_active``
False) and revokes its tokens.  Only the owner-level account endpoint may
re-enable a disabled row; self sign-up and doctor/employee creation refuse
an email that already has an account.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import ValidationError as DRFValidation, NotFound, PermissionDenied
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken

from backoffice.access import security_level, ACCESS_LEVEL_TO_SECURITY
from backoffice.models import Doctor, Employee

User = get_user_model()
logger = logging.getLogger(__name__)

DEFAULT_LEVEL_FOR_ROLE = {'doctor': 'Dokter', 'employee': 'Admin'}


def _check_password(password: str, user=None) -> None:
    try:
        validate_password(password, user=user)
    except ValidationError as e:
        raise DRFValidation({'password': e.messages})


def _email_taken(email: str, *, exclude_pk=None) -> Optional[User]:
    qs = User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email))
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    return qs.first()


@transaction.atomic
def create_login(*, email: str, password: str, name: str, role: str, access_level: Optional[str] = None,
                 doctor: Optional[Doctor] = None, employee: Optional[Employee] = None,
                 reenable: bool = False) -> User:
    """Create the account for a doctor/employee.

    A disabled account with the same email is reused only when ``reenable``
    is set, which only the owner-level account endpoint does.
    """
    email = (email or '').strip().lower()
    if not email:
        raise DRFValidation({'email': 'Email wajib diisi'})
    if role not in DEFAULT_LEVEL_FOR_ROLE:
        raise DRFValidation({'role': 'Role harus doctor atau employee'})
    access_level = access_level or DEFAULT_LEVEL_FOR_ROLE[role]
    if access_level not in ACCESS_LEVEL_TO_SECURITY:
        raise DRFValidation({'access_level': 'Access level tidak valid'})

    user = _email_taken(email)
    if user is not None and (user.is_active or not reenable):
        raise DRFValidation({'email': 'Email sudah terdaftar sebagai user'})
    if user is None:
        user = User(username=email, email=email)
    _check_password(password, user)

    # a disabled account may still hold the link
    if doctor is not None:
        User.objects.filter(doctor=doctor).exclude(pk=user.pk).update(doctor=None)
    if employee is not None:
        User.objects.filter(employee=employee).exclude(pk=user.pk).update(employee=None)

    user.first_name = name[:150]
    user.role = role
    user.access_level = access_level
    user.is_active = True
    user.doctor = doctor
    user.employee = employee
    user.set_password(password)
    user.save()
    logger.info('login enabled for %s (%s/%s)', email, role, access_level)
    return user


def resolve_source(source_type: Optional[str], source_id) -> tuple[Optional[Doctor], Optional[Employee]]:
    if not source_id:
        return None, None
    if source_type == 'doctor':
        doctor = Doctor.objects.filter(pk=source_id).first()
        if not doctor:
            raise NotFound('Dokter tidak ditemukan')
        return doctor, None
    if source_type == 'employee':
        employee = Employee.objects.filter(pk=source_id).first()
        if not employee:
            raise NotFound('Karyawan tidak ditemukan')
        return None, employee
    raise DRFValidation({'source_type': 'source_type harus doctor atau employee'})


def register_login(*, email: str, password: str, name: str, role: str,
                   doctor: Optional[Doctor] = None, employee: Optional[Employee] = None) -> User:
    """Self sign-up; only the owner may re-enable an existing account."""
    email = (email or '').strip().lower()
    existing = _email_taken(email)
    if existing is None and doctor is not None:
        existing = User.objects.filter(doctor=doctor).first()
    if existing is None and employee is not None:
        existing = User.objects.filter(employee=employee).first()
    if existing is not None:
        if existing.is_active:
            raise DRFValidation({'email': 'Email sudah terdaftar sebagai user'})
        raise PermissionDenied('Akun ini dinonaktifkan. Hubungi Owner untuk mengaktifkan kembali.')
    return create_login(email=email, password=password, name=name, role=role, doctor=doctor, employee=employee)


def create_account(*, name: str, email: str, password: str, role: str, access_level: str,
                   source_id=None) -> User:
    doctor, employee = resolve_source(role, source_id)
    source = doctor or employee
    if source is not None:
        linked = getattr(source, 'account', None)
        if linked is not None and linked.is_active:
            raise DRFValidation({'source_id': 'Data ini sudah memiliki user account'})
        name = name or source.name
        email = email or source.email
    return create_login(email=email, password=password, name=name, role=role,
                        access_level=access_level, doctor=doctor, employee=employee, reenable=True)


def get_account(pk) -> User:
    user = User.objects.filter(pk=pk).first()
    if not user:
        raise NotFound('User account tidak ditemukan')
    return user


def update_account(user: User, actor, *, access_level: Optional[str] = None, name: Optional[str] = None,
                   password: Optional[str] = None) -> User:
    fields = []
    if access_level is not None:
        if access_level not in ACCESS_LEVEL_TO_SECURITY:
            raise DRFValidation({'access_level': 'Access level tidak valid'})
        if user.pk == getattr(actor, 'pk', None) and ACCESS_LEVEL_TO_SECURITY[access_level] < security_level(actor):
            raise PermissionDenied('Tidak dapat menurunkan level akses akun sendiri')
        user.access_level = access_level
        fields.append('access_level')
    if name:
        user.first_name = name[:150]
        fields.append('first_name')
    if password:
        _check_password(password, user)
        user.set_password(password)
        fields.append('password')
    if fields:
        user.save(update_fields=fields)
    return user


def revoke_tokens(user: User) -> int:
    Token.objects.filter(user=user).delete()
    count = 0
    for token in OutstandingToken.objects.filter(user=user):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        count += int(created)
    return count


@transaction.atomic
def disable_login(user: User, actor) -> User:
    if user.pk == getattr(actor, 'pk', None):
        raise PermissionDenied('Tidak dapat menonaktifkan akun sendiri')
    user.is_active = False
    user.save(update_fields=['is_active'])
    revoked = revoke_tokens(user)
    logger.info('login disabled for %s (%d refresh tokens revoked)', user.username, revoked)
    return user


def format_account(user: User) -> dict:
    source_type, source_id, source = None, None, None
    if user.doctor_id:
        source_type, source_id, source = 'doctor', user.doctor_id, user.doctor
    elif user.employee_id:
        source_type, source_id, source = 'employee', user.employee_id, user.employee
    return {
        'id': user.id,
        'name': user.get_full_name() or (source.name if source else user.username),
        'email': user.email,
        'username': user.username,
        'phone': getattr(source, 'phone', '') if source else '',
        'role': user.role or source_type or '',
        'position': _position(source_type, source),
        'status': _status(source_type, source),
        'access_level': user.access_level,
        'has_login': user.is_active,
        'source_type': source_type,
        'source_id': source_id,
        'created_at': user.date_joined.isoformat() if user.date_joined else None,
    }


def _position(source_type, source) -> str:
    if source_type == 'doctor':
        return source.specialization
    if source_type == 'employee':
        return source.position
    return ''


def _status(source_type, source) -> str:
    if source is None:
        return ''
    return 'active' if source.is_active else 'inactive'


def list_accounts(*, role: Optional[str] = None, access_level: Optional[str] = None,
                  q: Optional[str] = None) -> list[dict]:
    """All doctors and employees with their login state, plus unlinked accounts."""
    rows: list[dict] = []
    for doctor in Doctor.objects.select_related('account'):
        account = getattr(doctor, 'account', None)
        if account is not None:
            rows.append(format_account(account))
            continue
        rows.append({
            'id': None, 'name': doctor.name, 'email': doctor.email, 'username': None,
            'phone': doctor.phone, 'role': 'doctor', 'position': doctor.specialization,
            'status': doctor.status, 'access_level': DEFAULT_LEVEL_FOR_ROLE['doctor'],
            'has_login': False, 'source_type': 'doctor', 'source_id': doctor.id, 'created_at': None,
        })
    for employee in Employee.objects.select_related('account'):
        account = getattr(employee, 'account', None)
        if account is not None:
            rows.append(format_account(account))
            continue
        rows.append({
            'id': None, 'name': employee.name, 'email': employee.email, 'username': None,
            'phone': employee.phone, 'role': 'employee', 'position': employee.position,
            'status': 'active' if employee.is_active else 'inactive',
            'access_level': DEFAULT_LEVEL_FOR_ROLE['employee'],
            'has_login': False, 'source_type': 'employee', 'source_id': employee.id, 'created_at': None,
        })
    for user in User.objects.filter(doctor__isnull=True, employee__isnull=True).order_by('id'):
        rows.append(format_account(user))

    if role:
        rows = [r for r in rows if r['role'] == role]
    if access_level:
        rows = [r for r in rows if r['access_level'] == access_level]
    if q:
        needle = q.lower()
        rows = [r for r in rows if needle in (r['name'] or '').lower() or needle in (r['email'] or '').lower()]
    return rows


def verify_user(email: str) -> dict:
    """Look up an active doctor or employee for a login email."""
    email = (email or '').strip().lower()
    doctor = Doctor.objects.filter(email__iexact=email, is_active=True).first()
    if doctor:
        return {'found': True, 'userType': 'doctor', 'id': doctor.id, 'name': doctor.name}
    employee = Employee.objects.filter(email__iexact=email, status='aktif').first()
    if employee:
        return {'found': True, 'userType': 'employee', 'id': employee.id, 'name': employee.name,
                'position': employee.position}
    return {'found': False}
