"""
Treatment records: totals, voucher discount and doctor fee.

Every amount is computed server side from the submitted lines; clients
never send totals.  Updates merge the new input over the stored input
and recompute everything, so a treatment is always consistent with its
lines.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import NotFound, ValidationError

from backoffice.access import STAFF, security_level
from backoffice.models import Doctor, Patient, Treatment, Voucher, VoucherUsage
from .audit import actor_name
from .clinic import default_admin_fee
from .fees import FeeItem, calculate_fees, rules_from_db, product_categories
from .pricing import money, treatment_totals, resolve_admin_fee, jsonable_lines, to_decimal
from .vouchers import discount_for, min_purchase_message, normalize_code, use_voucher, validate_voucher

logger = logging.getLogger(__name__)


def format_treatment(t: Treatment) -> dict:
    return {
        'id': t.id,
        'doctorId': t.doctor_id,
        'doctorName': t.doctor_name,
        'patientId': t.patient_id,
        'patientName': t.patient_name,
        'treatmentTypes': t.items,
        'selectedMedications': t.medications,
        'description': t.description,
        'shift': t.shift,
        'date': t.date.isoformat() if t.date else None,
        'subtotal': money(t.subtotal),
        'totalDiscount': money(t.total_discount),
        'totalNominal': money(t.total_nominal),
        'medicationCost': money(t.medication_cost),
        'adminFee': money(t.admin_fee),
        'voucherCode': t.voucher_code or None,
        'voucherDiscount': money(t.voucher_discount),
        'totalTindakan': money(t.total_amount),
        'paymentMethod': t.payment_method,
        'paymentStatus': t.payment_status,
        'dpAmount': money(t.dp_amount),
        'outstandingAmount': money(t.outstanding_amount),
        'paymentNotes': t.payment_notes,
        'feePercentage': money(t.fee_percentage),
        'calculatedFee': money(t.calculated_fee),
        'feeDetails': t.fee_details,
        'createdAt': t.created_at.isoformat() if t.created_at else None,
    }


def visible_treatments(user):
    """Doctor accounts below staff level only see their own treatments."""
    qs = Treatment.objects.all()
    if getattr(user, 'role', '') == 'doctor' and security_level(user) < STAFF:
        qs = qs.filter(doctor_id=user.doctor_id) if user.doctor_id else qs.none()
    return qs


def filter_treatments(qs, *, doctor_id=None, patient_id=None, start=None, end=None, payment_status=None):
    if doctor_id:
        qs = qs.filter(doctor_id=doctor_id)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if start:
        qs = qs.filter(date__gte=start)
    if end:
        qs = qs.filter(date__lte=end)
    if payment_status:
        qs = qs.filter(payment_status=payment_status)
    return qs


def _get(model, pk, label: str):
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise ValidationError({f'{label}Id': f'{label.capitalize()} tidak ditemukan'})
    return obj


def _fee_overrides(items: list[dict], data: dict) -> dict:
    flat = data.get('feePercentage')
    if flat is not None and flat != '':
        return {i['id']: flat for i in items}
    return {str(k): v for k, v in (data.get('feeOverrides') or {}).items()}


def _compute(data: dict, *, voucher: Optional[Voucher] = None) -> dict:
    """Compute every derived field of a treatment from its input."""
    admin_fee = resolve_admin_fee(data.get('adminFeeOverride'), default_admin_fee())
    payment_status = data.get('paymentStatus') or 'lunas'
    kwargs = dict(admin_fee=admin_fee, payment_status=payment_status, dp_amount=data.get('dpAmount'))

    # the voucher applies to the treatment amount, so price the lines first
    base = treatment_totals(data.get('treatmentTypes'), data.get('selectedMedications'),
                            admin_fee=admin_fee)
    voucher_discount = to_decimal(0)
    code = (data.get('voucherCode') or '').strip()
    if voucher is not None:
        # already counted at creation; only the amount rules apply again
        if base.total_nominal < voucher.min_purchase:
            raise ValidationError({'voucherCode': min_purchase_message(voucher)})
        voucher_discount = discount_for(voucher, base.total_nominal)
    elif code:
        check = validate_voucher(code, base.total_nominal, admin_fee)
        if not check.valid:
            raise ValidationError({'voucherCode': check.message})
        voucher = check.voucher
        voucher_discount = check.discount_amount
    totals = treatment_totals(data.get('treatmentTypes'), data.get('selectedMedications'),
                              voucher_discount=voucher_discount, **kwargs)
    if not totals.items:
        raise ValidationError({'treatmentTypes': 'Minimal satu tindakan harus dipilih'})

    overrides = _fee_overrides(totals.items, data)
    fee_items = [FeeItem(id=i['id'], name=i['name'], price=i['price'], final_price=i['finalPrice'])
                 for i in totals.items]
    calc = calculate_fees(
        data['doctorId'], fee_items, rules_from_db(),
        categories=product_categories(i['name'] for i in totals.items),
        payment_status=payment_status, dp_amount=totals.dp_amount, overrides=overrides,
    )
    fee_details = calc.as_dict()
    fee_details['overrides'] = {k: str(v) for k, v in overrides.items()}
    return {
        'items': jsonable_lines(totals.items),
        'medications': jsonable_lines(totals.medications),
        'subtotal': totals.subtotal,
        'total_discount': totals.total_discount,
        'total_nominal': totals.total_nominal,
        'medication_cost': totals.medication_cost,
        'admin_fee': totals.admin_fee,
        'voucher': voucher,
        'voucher_code': voucher.code if voucher else '',
        'voucher_discount': totals.voucher_discount,
        'total_amount': totals.total_amount,
        'payment_status': payment_status,
        'dp_amount': totals.dp_amount,
        'outstanding_amount': totals.outstanding_amount,
        'fee_percentage': calc.average_fee_percentage,
        'calculated_fee': calc.total_fee_amount,
        'fee_details': fee_details,
    }


SIMPLE_FIELDS = {
    'description': 'description',
    'shift': 'shift',
    'date': 'date',
    'paymentMethod': 'payment_method',
    'paymentNotes': 'payment_notes',
}


@transaction.atomic
def create_treatment(data: dict, *, user=None) -> Treatment:
    doctor = _get(Doctor, data['doctorId'], 'doctor')
    patient = _get(Patient, data['patientId'], 'patient')
    computed = _compute(data)
    t = Treatment(
        doctor=doctor, doctor_name=doctor.name,
        patient=patient, patient_name=patient.name,
        created_by=user if getattr(user, 'pk', None) else None,
        **computed,
    )
    for key, attr in SIMPLE_FIELDS.items():
        if data.get(key) is not None:
            setattr(t, attr, data[key])
    t.save()
    if t.voucher_id:
        use_voucher(t.voucher_code, t.total_nominal, t.admin_fee, patient=patient,
                    transaction_type='treatment', transaction_id=t.id,
                    used_by=actor_name(user))
    logger.info('treatment %s saved: total=%s fee=%s', t.id, t.total_amount, t.calculated_fee)
    return t


def _stored_input(t: Treatment) -> dict:
    return {
        'doctorId': t.doctor_id,
        'patientId': t.patient_id,
        'treatmentTypes': t.items,
        'selectedMedications': t.medications,
        'adminFeeOverride': t.admin_fee,
        'paymentStatus': t.payment_status,
        'dpAmount': t.dp_amount,
        'feeOverrides': (t.fee_details or {}).get('overrides') or {},
    }


@transaction.atomic
def update_treatment(t: Treatment, data: dict) -> Treatment:
    merged = _stored_input(t)
    merged.update({k: v for k, v in data.items() if v is not None})
    if 'feePercentage' in data and data['feePercentage'] is not None:
        merged.pop('feeOverrides', None)
    if 'voucherCode' in data and normalize_code(data['voucherCode']) != (t.voucher_code or ''):
        raise ValidationError({'voucherCode': 'Voucher tidak dapat diubah setelah tindakan disimpan'})
    merged.pop('voucherCode', None)

    if merged['doctorId'] != t.doctor_id:
        doctor = _get(Doctor, merged['doctorId'], 'doctor')
        t.doctor, t.doctor_name = doctor, doctor.name
    if merged['patientId'] != t.patient_id:
        patient = _get(Patient, merged['patientId'], 'patient')
        t.patient, t.patient_name = patient, patient.name

    for attr, value in _compute(merged, voucher=t.voucher).items():
        setattr(t, attr, value)
    for key, attr in SIMPLE_FIELDS.items():
        if data.get(key) is not None:
            setattr(t, attr, data[key])
    t.save()
    if t.voucher_code:
        _voucher_usages(t).update(
            patient=t.patient, patient_name=t.patient_name,
            original_amount=t.total_nominal, discount_amount=t.voucher_discount,
            final_total_amount=t.total_nominal - t.voucher_discount + t.admin_fee, admin_fee=t.admin_fee,
        )
    return t


def get_treatment(user, pk) -> Treatment:
    t = visible_treatments(user).filter(pk=pk).first()
    if t is None:
        raise NotFound('Data tindakan tidak ditemukan')
    return t


def fee_preview(data: dict) -> dict:
    """Run the fee calculator over ad-hoc items without saving anything."""
    items = []
    for idx, raw in enumerate(data.get('items') or []):
        price = to_decimal(raw.get('price'))
        final_price = to_decimal(raw.get('finalPrice'), price)
        items.append(FeeItem(id=str(raw.get('id') or f'item-{idx + 1}'), name=str(raw.get('name') or ''),
                             price=price, final_price=final_price))
    calc = calculate_fees(
        data.get('doctorId'), items, rules_from_db(),
        categories=product_categories(i.name for i in items),
        payment_status=data.get('paymentStatus') or 'lunas', dp_amount=data.get('dpAmount'),
        overrides={str(k): v for k, v in (data.get('feeOverrides') or {}).items()},
    )
    return calc.as_dict()


def _voucher_usages(t: Treatment):
    return VoucherUsage.objects.filter(transaction_type='treatment', transaction_id=str(t.id))


@transaction.atomic
def delete_treatment(t: Treatment) -> None:
    """Delete a treatment and give back the voucher use it consumed."""
    if t.voucher_code:
        used = _voucher_usages(t).delete()[0]
        if used and t.voucher_id:
            Voucher.objects.filter(pk=t.voucher_id, usage_count__gte=used).update(
                usage_count=F('usage_count') - used)
    t.delete()
