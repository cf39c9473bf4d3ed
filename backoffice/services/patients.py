from datetime import date
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from backoffice.models import Patient

FIELD_MAP = {
    'name': 'name',
    'phone': 'phone',
    'email': 'email',
    'address': 'address',
    'birthDate': 'birth_date',
    'gender': 'gender',
    'bloodType': 'blood_type',
    'allergies': 'allergies',
    'emergencyContact': 'emergency_contact',
    'emergencyPhone': 'emergency_phone',
    'status': 'status',
}


def format_patient(p: Patient) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'phone': p.phone,
        'email': p.email,
        'address': p.address,
        'birthDate': p.birth_date.isoformat() if p.birth_date else None,
        'gender': p.gender,
        'bloodType': p.blood_type,
        'allergies': p.allergies,
        'emergencyContact': p.emergency_contact,
        'emergencyPhone': p.emergency_phone,
        'medicalRecordNumber': p.medical_record_number,
        'registrationDate': p.registration_date.isoformat() if p.registration_date else None,
        'status': p.status,
        'createdAt': p.created_at.isoformat() if p.created_at else None,
    }


def next_medical_record_number(day: Optional[date] = None) -> str:
    """RM-YYYYMMDD-NNN where NNN counts today's registrations (1-based)."""
    day = day or timezone.localdate()
    prefix = f"RM-{day:%Y%m%d}-"
    seq = Patient.objects.filter(registration_date=day).count() + 1
    number = f"{prefix}{seq:03d}"
    while Patient.objects.filter(medical_record_number=number).exists():
        seq += 1
        number = f"{prefix}{seq:03d}"
    return number


def list_patients(*, q: Optional[str] = None, include_inactive: bool = False):
    qs = Patient.objects.all()
    if not include_inactive:
        qs = qs.filter(status='aktif')
    if q:
        qs = qs.filter(Q(name__icontains=q) | Q(phone__icontains=q) | Q(medical_record_number__icontains=q))
    return qs


def create_patient(data: dict) -> Patient:
    values = {attr: data[key] for key, attr in FIELD_MAP.items() if data.get(key) is not None}
    today = timezone.localdate()
    # two registrations racing for the same number: retry with the next one
    for _ in range(3):
        try:
            with transaction.atomic():
                return Patient.objects.create(
                    medical_record_number=next_medical_record_number(today),
                    registration_date=today,
                    **values,
                )
        except IntegrityError:
            continue
    raise IntegrityError('could not allocate a medical record number')


def update_patient(patient: Patient, data: dict) -> Patient:
    for key, attr in FIELD_MAP.items():
        if key in data and data[key] is not None:
            setattr(patient, attr, data[key])
    patient.save()
    return patient
