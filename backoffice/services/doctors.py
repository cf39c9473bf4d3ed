import re
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from backoffice.exceptions import Conflict
from backoffice.models import Doctor
from .accounts import create_login

ACTIVE_DOCTORS_CACHE_KEY = 'doctors:active'

_DRG_PREFIX = re.compile(r'^(?:\s*drg(?:\.\s*|\s+))+', re.IGNORECASE)


def clean_doctor_name(name: str) -> str:
    """Collapse whitespace and repeated "drg." prefixes into one "drg. "."""
    name = ' '.join((name or '').split())
    if _DRG_PREFIX.match(name):
        rest = _DRG_PREFIX.sub('', name).strip()
        return f'drg. {rest}' if rest else 'drg.'
    return name


def format_doctor(d: Doctor) -> dict:
    account = getattr(d, 'account', None)
    return {
        'id': d.id,
        'name': d.name,
        'specialization': d.specialization,
        'phone': d.phone,
        'email': d.email,
        'licenseNumber': d.license_number,
        'shifts': d.shifts or [],
        'status': d.status,
        'isActive': d.is_active,
        'statusUpdatedAt': d.status_updated_at.isoformat() if d.status_updated_at else None,
        'statusUpdatedBy': d.status_updated_by,
        'hasLoginAccess': bool(account and account.is_active),
        'createdAt': d.created_at.isoformat() if d.created_at else None,
    }


def list_doctors(*, q: Optional[str] = None, active_only: bool = False) -> list[dict]:
    qs = Doctor.objects.select_related('account')
    if active_only:
        qs = qs.filter(is_active=True)
    if q:
        qs = qs.filter(name__icontains=q) | qs.filter(specialization__icontains=q)
    return [format_doctor(d) for d in qs]


def active_doctors(*, refresh: bool = False) -> list[dict]:
    data = None if refresh else cache.get(ACTIVE_DOCTORS_CACHE_KEY)
    if data is None:
        data = list_doctors(active_only=True)
        cache.set(ACTIVE_DOCTORS_CACHE_KEY, data, settings.CLINIC_CACHE_SECONDS)
    return data


def invalidate_doctor_cache() -> None:
    cache.delete(ACTIVE_DOCTORS_CACHE_KEY)


FIELD_MAP = {
    'name': 'name',
    'specialization': 'specialization',
    'phone': 'phone',
    'email': 'email',
    'licenseNumber': 'license_number',
    'shifts': 'shifts',
}


@transaction.atomic
def create_doctor(data: dict, *, password: Optional[str] = None) -> Doctor:
    values = {attr: data[key] for key, attr in FIELD_MAP.items() if key in data}
    values['name'] = clean_doctor_name(values['name'])
    values['email'] = values['email'].strip().lower()
    doctor = Doctor.objects.create(**values)
    if password:
        create_login(email=doctor.email, password=password, name=doctor.name,
                     role='doctor', access_level='Dokter', doctor=doctor)
    invalidate_doctor_cache()
    return doctor


def update_doctor(doctor: Doctor, data: dict) -> Doctor:
    for key, attr in FIELD_MAP.items():
        if key in data:
            setattr(doctor, attr, data[key])
    if 'name' in data:
        doctor.name = clean_doctor_name(doctor.name)
    if 'email' in data:
        doctor.email = doctor.email.strip().lower()
    if 'isActive' in data and bool(data['isActive']) != doctor.is_active:
        doctor.is_active = bool(data['isActive'])
        doctor.status_updated_at = timezone.now()
    doctor.save()
    invalidate_doctor_cache()
    return doctor


def set_doctor_status(doctor: Doctor, is_active: bool, *, updated_by: str = '') -> Doctor:
    doctor.is_active = is_active
    doctor.status_updated_at = timezone.now()
    doctor.status_updated_by = updated_by
    doctor.save(update_fields=['is_active', 'status_updated_at', 'status_updated_by', 'updated_at'])
    invalidate_doctor_cache()
    return doctor


@transaction.atomic
def delete_doctor(doctor: Doctor) -> None:
    if doctor.treatments.exists():
        raise Conflict('Dokter memiliki data tindakan; nonaktifkan dokter sebagai gantinya.')
    account = getattr(doctor, 'account', None)
    if account is not None:
        account.is_active = False
        account.save(update_fields=['is_active'])
    doctor.delete()
    invalidate_doctor_cache()
