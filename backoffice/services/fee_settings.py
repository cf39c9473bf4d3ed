from django.db import transaction
from rest_framework.exceptions import ValidationError

from backoffice.models import Doctor, FeeSetting
from .pricing import money


def format_fee_setting(s: FeeSetting) -> dict:
    doctors = list(s.doctors.all())
    return {
        'id': s.id,
        'doctorIds': [d.id for d in doctors],
        'doctorNames': [d.name for d in doctors],
        'category': s.category,
        'treatmentTypes': s.treatment_types or [],
        'feePercentage': money(s.fee_percentage),
        'isDefault': s.is_default,
        'description': s.description,
        'createdAt': s.created_at.isoformat() if s.created_at else None,
    }


def list_fee_settings():
    return FeeSetting.objects.prefetch_related('doctors')


def _doctors(ids) -> list[Doctor]:
    ids = list(dict.fromkeys(ids or []))
    doctors = list(Doctor.objects.filter(pk__in=ids))
    missing = set(ids) - {d.id for d in doctors}
    if missing:
        raise ValidationError({'doctorIds': f"Dokter tidak ditemukan: {', '.join(map(str, sorted(missing)))}"})
    return doctors


def _apply(s: FeeSetting, data: dict) -> FeeSetting:
    if data.get('category') is not None:
        s.category = data['category']
    if data.get('treatmentTypes') is not None:
        s.treatment_types = [t for t in data['treatmentTypes'] if t]
    if data.get('feePercentage') is not None:
        s.fee_percentage = data['feePercentage']
    if data.get('isDefault') is not None:
        s.is_default = data['isDefault']
    if data.get('description') is not None:
        s.description = data['description']
    s.save()
    if data.get('doctorIds') is not None:
        s.doctors.set(_doctors(data['doctorIds']))
    return s


@transaction.atomic
def create_fee_setting(data: dict) -> FeeSetting:
    return _apply(FeeSetting(), data)


@transaction.atomic
def update_fee_setting(s: FeeSetting, data: dict) -> FeeSetting:
    return _apply(s, data)
