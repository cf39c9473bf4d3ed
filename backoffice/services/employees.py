from typing import Optional

from django.db import transaction
from rest_framework.exceptions import ValidationError

from backoffice.exceptions import Conflict
from backoffice.models import Employee
from .accounts import create_login, _email_taken

FIELD_MAP = {
    'name': 'name',
    'position': 'position',
    'phone': 'phone',
    'email': 'email',
    'joinDate': 'join_date',
    'baseSalary': 'base_salary',
    'status': 'status',
}


def format_employee(e: Employee) -> dict:
    account = getattr(e, 'account', None)
    return {
        'id': e.id,
        'name': e.name,
        'position': e.position,
        'phone': e.phone,
        'email': e.email,
        'joinDate': e.join_date.isoformat() if e.join_date else None,
        'baseSalary': float(e.base_salary),
        'status': e.status,
        'isActive': e.is_active,
        'hasLoginAccess': bool(account and account.is_active),
        'accessLevel': account.access_level if account else None,
        'createdAt': e.created_at.isoformat() if e.created_at else None,
    }


@transaction.atomic
def create_employee(data: dict, *, password: Optional[str] = None) -> Employee:
    values = {attr: data[key] for key, attr in FIELD_MAP.items() if data.get(key) is not None}
    values['email'] = values['email'].strip().lower()
    if password:
        existing = _email_taken(values['email'])
        if existing is not None and existing.is_active:
            raise ValidationError({'email': 'Email sudah digunakan oleh user lain'})
    employee = Employee.objects.create(**values)
    if password:
        create_login(email=employee.email, password=password, name=employee.name,
                     role='employee', access_level='Admin', employee=employee)
    return employee


def update_employee(employee: Employee, data: dict) -> Employee:
    for key, attr in FIELD_MAP.items():
        if key in data and data[key] is not None:
            setattr(employee, attr, data[key])
    if 'email' in data:
        employee.email = employee.email.strip().lower()
    employee.save()
    return employee


@transaction.atomic
def delete_employee(employee: Employee) -> None:
    if employee.salaries.exists():
        raise Conflict('Karyawan memiliki data gaji; ubah status menjadi nonaktif.')
    account = getattr(employee, 'account', None)
    if account is not None:
        account.is_active = False
        account.save(update_fields=['is_active'])
    employee.delete()
