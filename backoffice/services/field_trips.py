from typing import Optional

from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import ValidationError

from backoffice.models import Doctor, Employee, FieldTripProduct, FieldTripSale
from .pricing import field_trip_totals, money, to_decimal

CUSTOMER_FIELDS = {
    'customerName': 'customer_name',
    'customerPhone': 'customer_phone',
    'customerEmail': 'customer_email',
    'customerAddress': 'customer_address',
    'organization': 'organization',
    'saleDate': 'sale_date',
    'eventDate': 'event_date',
    'eventEndDate': 'event_end_date',
    'notes': 'notes',
    'status': 'status',
    'paymentMethod': 'payment_method',
    'paymentNotes': 'payment_notes',
}


def format_sale(s: FieldTripSale) -> dict:
    return {
        'id': s.id,
        'customerName': s.customer_name,
        'customerPhone': s.customer_phone,
        'customerEmail': s.customer_email,
        'customerAddress': s.customer_address,
        'organization': s.organization,
        'productId': s.product_id,
        'productName': s.product_name,
        'productPrice': money(s.product_price),
        'quantity': s.quantity,
        'participants': s.participants,
        'totalAmount': money(s.total_amount),
        'discount': money(s.discount),
        'finalAmount': money(s.final_amount),
        'saleDate': s.sale_date.isoformat() if s.sale_date else None,
        'eventDate': s.event_date.isoformat() if s.event_date else None,
        'eventEndDate': s.event_end_date.isoformat() if s.event_end_date else None,
        'notes': s.notes,
        'status': s.status,
        'paymentMethod': s.payment_method,
        'paymentStatus': s.payment_status,
        'dpAmount': money(s.dp_amount),
        'outstandingAmount': money(s.outstanding_amount),
        'paymentNotes': s.payment_notes,
        'selectedDoctors': s.selected_doctors,
        'selectedEmployees': s.selected_employees,
        'totalDoctorFees': money(s.total_doctor_fees),
        'totalEmployeeBonuses': money(s.total_employee_bonuses),
        'createdAt': s.created_at.isoformat() if s.created_at else None,
    }


def resolve_doctors(entries) -> list[dict]:
    """Attach name/specialization snapshots to ``[{doctorId, fee}]``."""
    out, seen = [], set()
    for entry in entries or []:
        doctor_id = entry.get('doctorId')
        if doctor_id in seen:
            raise ValidationError({'selectedDoctors': 'Dokter yang sama dipilih lebih dari sekali'})
        seen.add(doctor_id)
        doctor = Doctor.objects.filter(pk=doctor_id).first()
        if doctor is None:
            raise ValidationError({'selectedDoctors': f'Dokter {doctor_id} tidak ditemukan'})
        fee = to_decimal(entry.get('fee'))
        if fee < 0:
            raise ValidationError({'selectedDoctors': 'Fee dokter tidak boleh negatif'})
        out.append({'doctorId': doctor.id, 'doctorName': doctor.name,
                    'specialization': doctor.specialization, 'fee': float(fee)})
    return out


def resolve_employees(entries) -> list[dict]:
    out, seen = [], set()
    for entry in entries or []:
        employee_id = entry.get('employeeId')
        if employee_id in seen:
            raise ValidationError({'selectedEmployees': 'Karyawan yang sama dipilih lebih dari sekali'})
        seen.add(employee_id)
        employee = Employee.objects.filter(pk=employee_id).first()
        if employee is None:
            raise ValidationError({'selectedEmployees': f'Karyawan {employee_id} tidak ditemukan'})
        bonus = to_decimal(entry.get('bonus'))
        if bonus < 0:
            raise ValidationError({'selectedEmployees': 'Bonus karyawan tidak boleh negatif'})
        out.append({'employeeId': employee.id, 'employeeName': employee.name,
                    'position': employee.position, 'bonus': float(bonus)})
    return out


def _apply(sale: FieldTripSale, data: dict, product: FieldTripProduct) -> FieldTripSale:
    for key, attr in CUSTOMER_FIELDS.items():
        if key in data and data[key] is not None:
            setattr(sale, attr, data[key])
    if sale.event_date and sale.event_end_date and sale.event_end_date < sale.event_date:
        raise ValidationError({'eventEndDate': 'Tanggal selesai tidak boleh sebelum tanggal acara'})
    if product.id != sale.product_id or sale.pk is None:
        sale.product = product
        sale.product_name = product.name
        sale.product_price = product.price
    for key, attr in (('quantity', 'quantity'), ('participants', 'participants'), ('paymentStatus', 'payment_status')):
        if data.get(key) is not None:
            setattr(sale, attr, data[key])
    if 'selectedDoctors' in data:
        sale.selected_doctors = resolve_doctors(data['selectedDoctors'])
    if 'selectedEmployees' in data:
        sale.selected_employees = resolve_employees(data['selectedEmployees'])

    totals = field_trip_totals(
        sale.product_price, sale.quantity,
        discount=data['discount'] if data.get('discount') is not None else sale.discount,
        doctor_fees=[d['fee'] for d in sale.selected_doctors],
        employee_bonuses=[e['bonus'] for e in sale.selected_employees],
        payment_status=sale.payment_status,
        dp_amount=data['dpAmount'] if data.get('dpAmount') is not None else sale.dp_amount,
    )
    sale.total_amount = totals.total_amount
    sale.discount = totals.discount
    sale.final_amount = totals.final_amount
    sale.total_doctor_fees = totals.total_doctor_fees
    sale.total_employee_bonuses = totals.total_employee_bonuses
    sale.dp_amount = totals.dp_amount
    sale.outstanding_amount = totals.outstanding_amount
    sale.save()
    return sale


def _product(product_id) -> FieldTripProduct:
    product = FieldTripProduct.objects.filter(pk=product_id).first()
    if product is None:
        raise ValidationError({'productId': 'Produk field trip tidak ditemukan'})
    return product


@transaction.atomic
def create_sale(data: dict, *, user=None) -> FieldTripSale:
    product = _product(data['productId'])
    if not product.is_active:
        raise ValidationError({'productId': 'Produk field trip tidak aktif'})
    sale = FieldTripSale(created_by=user if getattr(user, 'pk', None) else None)
    return _apply(sale, data, product)


@transaction.atomic
def update_sale(sale: FieldTripSale, data: dict) -> FieldTripSale:
    product = _product(data['productId']) if data.get('productId') else sale.product
    return _apply(sale, data, product)


def list_sales(*, status: Optional[str] = None, q: Optional[str] = None):
    qs = FieldTripSale.objects.all()
    if status:
        qs = qs.filter(status=status)
    if q:
        qs = qs.filter(Q(customer_name__icontains=q) | Q(organization__icontains=q) | Q(customer_phone__icontains=q))
    return qs
