from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from backoffice.models import Employee, Salary
from .pricing import salary_total, money, to_decimal


def format_salary(s: Salary) -> dict:
    return {
        'id': s.id,
        'employeeId': s.employee_id,
        'employeeName': s.employee_name,
        'baseSalary': money(s.base_salary),
        'bonus': money(s.bonus),
        'holidayAllowance': money(s.holiday_allowance),
        'totalSalary': money(s.total_salary),
        'month': s.month,
        'year': s.year,
        'notes': s.notes,
        'createdAt': s.created_at.isoformat() if s.created_at else None,
    }


def _save(salary: Salary) -> Salary:
    salary.total_salary = salary_total(salary.base_salary, salary.bonus, salary.holiday_allowance)
    try:
        with transaction.atomic():
            salary.save()
    except IntegrityError:
        raise ValidationError({'month': 'Gaji karyawan untuk periode ini sudah ada'})
    return salary


def create_salary(data: dict) -> Salary:
    employee = Employee.objects.filter(pk=data['employeeId']).first()
    if employee is None:
        raise ValidationError({'employeeId': 'Karyawan tidak ditemukan'})
    base = data.get('baseSalary')
    salary = Salary(
        employee=employee,
        employee_name=employee.name,
        base_salary=to_decimal(base) if base is not None else employee.base_salary,
        bonus=to_decimal(data.get('bonus')),
        holiday_allowance=to_decimal(data.get('holidayAllowance')),
        month=data['month'],
        year=data['year'],
        notes=data.get('notes') or '',
    )
    return _save(salary)


def update_salary(salary: Salary, data: dict) -> Salary:
    for key, attr in (('baseSalary', 'base_salary'), ('bonus', 'bonus'),
                      ('holidayAllowance', 'holiday_allowance')):
        if data.get(key) is not None:
            setattr(salary, attr, to_decimal(data[key]))
    for key in ('month', 'year', 'notes'):
        if data.get(key) is not None:
            setattr(salary, key, data[key])
    return _save(salary)


def list_salaries(*, employee_id=None, month=None, year=None):
    qs = Salary.objects.all()
    if employee_id:
        qs = qs.filter(employee_id=employee_id)
    if month:
        qs = qs.filter(month=month)
    if year:
        qs = qs.filter(year=year)
    return qs
