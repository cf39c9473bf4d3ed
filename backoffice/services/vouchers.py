"""
Voucher validation and usage tracking.

A voucher discounts only the treatment amount; the admin fee is added
back untouched.  ``validate_voucher`` never raises for an unusable
voucher: it returns a :class:`VoucherCheck` with ``valid`` False and a
message so the cashier screen can show the reason.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from django.db import transaction
from django.db.models import Count, F, Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from backoffice.models import Voucher, VoucherUsage
from .pricing import ZERO, HUNDRED, quantize, to_decimal, money

FIELD_MAP = {
    'code': 'code',
    'title': 'title',
    'description': 'description',
    'discountType': 'discount_type',
    'discountValue': 'discount_value',
    'maxDiscount': 'max_discount',
    'minPurchase': 'min_purchase',
    'expiryDate': 'expiry_date',
    'usageLimit': 'usage_limit',
    'isActive': 'is_active',
}


def normalize_code(code: Any) -> str:
    return str(code or '').strip().upper()


def format_voucher(v: Voucher) -> dict:
    return {
        'id': v.id,
        'code': v.code,
        'title': v.title,
        'description': v.description,
        'discountType': v.discount_type,
        'discountValue': float(v.discount_value),
        'maxDiscount': float(v.max_discount) if v.max_discount is not None else None,
        'minPurchase': float(v.min_purchase),
        'expiryDate': v.expiry_date.isoformat(),
        'usageLimit': v.usage_limit,
        'usageCount': v.usage_count,
        'isActive': v.is_active,
        'isExpired': is_expired(v),
        'createdBy': v.created_by,
        'createdAt': v.created_at.isoformat() if v.created_at else None,
    }


def format_usage(u: VoucherUsage) -> dict:
    return {
        'id': u.id,
        'voucherId': u.voucher_id,
        'voucherCode': u.voucher_code,
        'patientId': u.patient_id,
        'patientName': u.patient_name,
        'originalAmount': money(u.original_amount),
        'discountAmount': money(u.discount_amount),
        'finalTotalAmount': money(u.final_total_amount),
        'adminFee': money(u.admin_fee),
        'transactionType': u.transaction_type,
        'transactionId': u.transaction_id,
        'usedBy': u.used_by,
        'usedDate': u.used_at.isoformat() if u.used_at else None,
    }


def is_expired(v: Voucher, today=None) -> bool:
    return v.expiry_date < (today or timezone.localdate())


def min_purchase_message(v: Voucher) -> str:
    return f'Minimal pembelian Rp {v.min_purchase:,.0f}'.replace(',', '.')


def discount_for(v: Voucher, amount: Decimal) -> Decimal:
    if v.discount_type == 'percentage':
        discount = quantize(amount * v.discount_value / HUNDRED)
        if v.max_discount is not None and v.max_discount > 0:
            discount = min(discount, v.max_discount)
    else:
        discount = v.discount_value
    return max(ZERO, min(discount, amount))


@dataclass
class VoucherCheck:
    valid: bool
    message: str = ''
    voucher: Optional[Voucher] = None
    treatment_amount: Decimal = ZERO
    admin_fee: Decimal = ZERO
    discount_amount: Decimal = ZERO

    @property
    def original_total(self) -> Decimal:
        return self.treatment_amount + self.admin_fee

    @property
    def final_total(self) -> Decimal:
        return self.treatment_amount - self.discount_amount + self.admin_fee

    def as_dict(self) -> dict:
        if not self.valid:
            return {'valid': False, 'message': self.message}
        return {
            'valid': True,
            'message': self.message,
            'voucher': format_voucher(self.voucher),
            'discountAmount': money(self.discount_amount),
            'originalTreatmentAmount': money(self.treatment_amount),
            'discountedTreatmentAmount': money(self.treatment_amount - self.discount_amount),
            'adminFee': money(self.admin_fee),
            'originalTotalAmount': money(self.original_total),
            'finalTotalAmount': money(self.final_total),
        }


def validate_voucher(code: Any, treatment_amount: Any, admin_fee: Any = 0, *, for_update: bool = False) -> VoucherCheck:
    code = normalize_code(code)
    if not code:
        raise ValidationError({'code': 'Kode voucher wajib diisi'})
    amount = to_decimal(treatment_amount)
    fee = to_decimal(admin_fee)
    qs = Voucher.objects.select_for_update() if for_update else Voucher.objects
    v = qs.filter(code=code, is_active=True).first()
    if v is None:
        return VoucherCheck(False, 'Voucher tidak ditemukan atau tidak aktif')
    if is_expired(v):
        return VoucherCheck(False, 'Voucher sudah kadaluarsa', voucher=v)
    if v.usage_limit and v.usage_count >= v.usage_limit:
        return VoucherCheck(False, 'Voucher sudah mencapai batas penggunaan', voucher=v)
    if amount < v.min_purchase:
        return VoucherCheck(False, min_purchase_message(v), voucher=v)
    discount = discount_for(v, amount)
    return VoucherCheck(True, 'Voucher valid', voucher=v, treatment_amount=amount,
                        admin_fee=fee, discount_amount=discount)


@transaction.atomic
def use_voucher(code: Any, treatment_amount: Any, admin_fee: Any = 0, *, patient=None, patient_name: str = '',
                transaction_type: str = 'treatment', transaction_id: Any = '', used_by: str = '') -> tuple[VoucherCheck, VoucherUsage]:
    check = validate_voucher(code, treatment_amount, admin_fee, for_update=True)
    if not check.valid:
        raise ValidationError({'code': check.message})
    v = check.voucher
    usage = VoucherUsage.objects.create(
        voucher=v,
        voucher_code=v.code,
        patient=patient,
        patient_name=patient_name or (patient.name if patient else ''),
        original_amount=check.treatment_amount,
        discount_amount=check.discount_amount,
        final_total_amount=check.final_total,
        admin_fee=check.admin_fee,
        transaction_type=transaction_type,
        transaction_id=str(transaction_id or ''),
        used_by=used_by,
    )
    Voucher.objects.filter(pk=v.pk).update(usage_count=F('usage_count') + 1)
    return check, usage


def voucher_stats() -> dict:
    today = timezone.localdate()
    usages = VoucherUsage.objects.all()
    agg = usages.aggregate(total=Count('id'), discount=Sum('discount_amount'))
    total = agg['total'] or 0
    discount = agg['discount'] or ZERO
    by_type = {
        row['transaction_type']: row['n']
        for row in usages.order_by().values('transaction_type').annotate(n=Count('id'))
    }
    return {
        'totalVouchers': Voucher.objects.count(),
        'activeVouchers': Voucher.objects.filter(is_active=True, expiry_date__gte=today).count(),
        'expiredVouchers': Voucher.objects.filter(expiry_date__lt=today).count(),
        'totalUsages': total,
        'totalDiscountGiven': money(discount),
        'avgDiscountPerUsage': money(quantize(discount / total)) if total else 0.0,
        'usagesByType': by_type,
        'recentUsages': [format_usage(u) for u in usages[:10]],
    }
