"""
Money arithmetic shared by treatments, field-trip sales and salaries.

Inputs arrive from JSON (ints, floats or strings) and are normalised to
``Decimal`` rounded to two places.  Validation failures raise DRF
``ValidationError`` so views can let them propagate to the API
exception handler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from rest_framework.exceptions import ValidationError

ZERO = Decimal('0')
HUNDRED = Decimal('100')
CENT = Decimal('0.01')

PAYMENT_STATUSES = ('lunas', 'dp')
DISCOUNT_TYPES = ('percentage', 'nominal')


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return d if d.is_finite() else default


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def item_discount(price: Decimal, discount: Decimal, discount_type: str) -> Decimal:
    """Discount amount for one treatment line."""
    if discount <= 0 or price <= 0:
        return ZERO
    if discount_type == 'percentage':
        return quantize(price * min(discount, HUNDRED) / HUNDRED)
    return min(discount, price)


def price_items(raw_items: Iterable[dict]) -> list[dict]:
    """Normalise treatment lines and compute each line's final price."""
    items = []
    for idx, raw in enumerate(raw_items or []):
        name = str(raw.get('name') or '').strip()
        if not name:
            raise ValidationError({'treatmentTypes': f'Nama tindakan baris {idx + 1} wajib diisi'})
        price = to_decimal(raw.get('price'))
        if price < 0:
            raise ValidationError({'treatmentTypes': f'Harga {name} tidak boleh negatif'})
        discount = to_decimal(raw.get('discount'))
        if discount < 0:
            raise ValidationError({'treatmentTypes': f'Diskon {name} tidak boleh negatif'})
        discount_type = raw.get('discountType') or 'nominal'
        if discount_type not in DISCOUNT_TYPES:
            raise ValidationError({'treatmentTypes': f'Jenis diskon tidak valid: {discount_type}'})
        discount_amount = item_discount(price, discount, discount_type)
        items.append({
            'id': str(raw.get('id') or f'item-{idx + 1}'),
            'productId': raw.get('productId'),
            'name': name,
            'price': price,
            'discount': discount,
            'discountType': discount_type,
            'discountAmount': discount_amount,
            'finalPrice': price - discount_amount,
        })
    return items


def price_medications(raw_meds: Iterable[dict]) -> list[dict]:
    meds = []
    for raw in raw_meds or []:
        name = str(raw.get('name') or '').strip()
        price = to_decimal(raw.get('price'))
        quantity = to_decimal(raw.get('quantity'), Decimal('1'))
        if price < 0 or quantity <= 0:
            raise ValidationError({'selectedMedications': f'Harga/jumlah obat {name} tidak valid'})
        meds.append({
            'productId': raw.get('productId'),
            'name': name,
            'price': price,
            'quantity': quantity,
            'total': quantize(price * quantity),
        })
    return meds


def check_payment(payment_status: str, dp_amount: Decimal, total: Decimal, field_name: str = 'dpAmount') -> Decimal:
    """Validate a down payment and return the outstanding amount."""
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError({'paymentStatus': 'Status pembayaran harus lunas atau dp'})
    if payment_status != 'dp':
        return ZERO
    if dp_amount <= 0:
        raise ValidationError({field_name: 'Jumlah DP wajib diisi'})
    if dp_amount >= total:
        raise ValidationError({field_name: 'Jumlah DP harus lebih kecil dari total'})
    return total - dp_amount


@dataclass
class TreatmentTotals:
    items: list[dict] = field(default_factory=list)
    medications: list[dict] = field(default_factory=list)
    subtotal: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_nominal: Decimal = ZERO
    medication_cost: Decimal = ZERO
    admin_fee: Decimal = ZERO
    voucher_discount: Decimal = ZERO
    total_amount: Decimal = ZERO
    dp_amount: Decimal = ZERO
    outstanding_amount: Decimal = ZERO


def treatment_totals(raw_items, raw_medications, *, admin_fee: Decimal,
                     voucher_discount: Decimal = ZERO, payment_status: str = 'lunas',
                     dp_amount: Any = 0) -> TreatmentTotals:
    t = TreatmentTotals()
    t.items = price_items(raw_items)
    t.medications = price_medications(raw_medications)
    t.subtotal = sum((i['price'] for i in t.items), ZERO)
    t.total_discount = sum((i['discountAmount'] for i in t.items), ZERO)
    t.total_nominal = t.subtotal - t.total_discount
    t.medication_cost = sum((m['total'] for m in t.medications), ZERO)
    t.admin_fee = admin_fee
    t.voucher_discount = min(voucher_discount, t.total_nominal)
    t.total_amount = t.total_nominal - t.voucher_discount + t.admin_fee + t.medication_cost
    t.dp_amount = to_decimal(dp_amount) if payment_status == 'dp' else ZERO
    t.outstanding_amount = check_payment(payment_status, t.dp_amount, t.total_amount)
    return t


def resolve_admin_fee(override: Any, default: Decimal) -> Decimal:
    """A positive override replaces the clinic's admin fee."""
    value = to_decimal(override)
    return value if value > 0 else default


@dataclass
class FieldTripTotals:
    total_amount: Decimal = ZERO
    discount: Decimal = ZERO
    final_amount: Decimal = ZERO
    total_doctor_fees: Decimal = ZERO
    total_employee_bonuses: Decimal = ZERO
    dp_amount: Decimal = ZERO
    outstanding_amount: Decimal = ZERO


def field_trip_totals(price: Decimal, quantity: int, *, discount: Any = 0,
                      doctor_fees: Iterable[Any] = (), employee_bonuses: Iterable[Any] = (),
                      payment_status: str = 'lunas', dp_amount: Any = 0) -> FieldTripTotals:
    t = FieldTripTotals()
    t.total_amount = quantize(price * quantity)
    t.discount = to_decimal(discount)
    if t.discount < 0 or t.discount > t.total_amount:
        raise ValidationError({'discount': 'Diskon tidak boleh negatif atau melebihi total'})
    t.final_amount = t.total_amount - t.discount
    t.total_doctor_fees = sum((to_decimal(f) for f in doctor_fees), ZERO)
    t.total_employee_bonuses = sum((to_decimal(b) for b in employee_bonuses), ZERO)
    t.dp_amount = to_decimal(dp_amount) if payment_status == 'dp' else ZERO
    t.outstanding_amount = check_payment(payment_status, t.dp_amount, t.final_amount)
    return t


def salary_total(base_salary: Any, bonus: Any = 0, holiday_allowance: Any = 0) -> Decimal:
    return to_decimal(base_salary) + to_decimal(bonus) + to_decimal(holiday_allowance)


def money(value: Optional[Decimal]) -> float:
    """JSON number for a money value."""
    return float(value or 0)


def jsonable_lines(lines: list[dict]) -> list[dict]:
    """Copy of computed lines with Decimals turned into floats (for JSONField)."""
    out = []
    for line in lines:
        out.append({k: (float(v) if isinstance(v, Decimal) else v) for k, v in line.items()})
    return out
