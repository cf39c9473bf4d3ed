from decimal import Decimal

from django.conf import settings
from django.core.cache import cache

from backoffice.models import ClinicSettings
from .pricing import to_decimal

CLINIC_CACHE_KEY = 'clinic:settings'


def format_clinic(obj: ClinicSettings) -> dict:
    return {
        'name': obj.name,
        'address': obj.address,
        'phone': obj.phone,
        'adminFee': float(obj.admin_fee),
        'logoUrl': obj.logo_url,
        'pageAccess': obj.page_access or {},
        'updatedAt': obj.updated_at.isoformat() if obj.updated_at else None,
    }


def clinic_payload(*, refresh: bool = False) -> dict:
    payload = None if refresh else cache.get(CLINIC_CACHE_KEY)
    if payload is None:
        payload = format_clinic(ClinicSettings.load())
        cache.set(CLINIC_CACHE_KEY, payload, settings.CLINIC_CACHE_SECONDS)
    return payload


def invalidate_clinic_cache() -> None:
    cache.delete(CLINIC_CACHE_KEY)


def default_admin_fee() -> Decimal:
    return to_decimal(clinic_payload().get('adminFee'), Decimal(settings.CLINIC_ADMIN_FEE))


def page_access_overrides() -> dict:
    return clinic_payload().get('pageAccess') or {}
