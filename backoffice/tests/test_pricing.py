from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from backoffice.services.doctors import clean_doctor_name
from backoffice.services.pricing import field_trip_totals, item_discount, resolve_admin_fee, treatment_totals


def test_item_discount_types():
    assert item_discount(Decimal('200000'), Decimal('10'), 'percentage') == Decimal('20000.00')
    assert item_discount(Decimal('50000'), Decimal('80000'), 'nominal') == Decimal('50000')
    assert item_discount(Decimal('50000'), Decimal('0'), 'nominal') == 0


def test_treatment_totals_with_voucher_and_medication():
    t = treatment_totals(
        [{'name': 'Scaling', 'price': 300000, 'discount': 10, 'discountType': 'percentage'},
         {'name': 'Tambal', 'price': 150000, 'discount': 50000, 'discountType': 'nominal'}],
        [{'name': 'Amoxicillin', 'price': 5000, 'quantity': 3}],
        admin_fee=Decimal('20000'), voucher_discount=Decimal('40000'),
    )
    assert [i['id'] for i in t.items] == ['item-1', 'item-2']
    assert t.subtotal == Decimal('450000')
    assert t.total_discount == Decimal('80000')
    assert t.total_nominal == Decimal('370000')
    assert t.medication_cost == Decimal('15000')
    # admin fee is never discounted
    assert t.total_amount == Decimal('370000') - Decimal('40000') + Decimal('20000') + Decimal('15000')
    assert t.outstanding_amount == 0


def test_down_payment_must_be_below_total():
    items = [{'name': 'Scaling', 'price': 100000}]
    t = treatment_totals(items, [], admin_fee=Decimal('20000'), payment_status='dp', dp_amount=50000)
    assert t.outstanding_amount == Decimal('70000')
    with pytest.raises(ValidationError):
        treatment_totals(items, [], admin_fee=Decimal('20000'), payment_status='dp', dp_amount=120000)
    with pytest.raises(ValidationError):
        treatment_totals(items, [], admin_fee=Decimal('20000'), payment_status='dp', dp_amount=0)


def test_admin_fee_override_only_when_positive():
    assert resolve_admin_fee(None, Decimal('20000')) == Decimal('20000')
    assert resolve_admin_fee(0, Decimal('20000')) == Decimal('20000')
    assert resolve_admin_fee('35000', Decimal('20000')) == Decimal('35000')


def test_field_trip_totals():
    t = field_trip_totals(Decimal('150000'), 20, discount=100000, doctor_fees=[250000, 150000],
                          employee_bonuses=[50000], payment_status='dp', dp_amount=1000000)
    assert t.total_amount == Decimal('3000000')
    assert t.final_amount == Decimal('2900000')
    assert t.total_doctor_fees == Decimal('400000')
    assert t.total_employee_bonuses == Decimal('50000')
    assert t.outstanding_amount == Decimal('1900000')


def test_field_trip_discount_cannot_exceed_total():
    with pytest.raises(ValidationError):
        field_trip_totals(Decimal('100000'), 1, discount=150000)


@pytest.mark.parametrize('raw,expected', [
    ('drg. drg. Ani  Lestari', 'drg. Ani Lestari'),
    ('DRG.drg Budi', 'drg. Budi'),
    ('Drga Putri', 'Drga Putri'),
    ('  Siti   Rahma ', 'Siti Rahma'),
])
def test_clean_doctor_name(raw, expected):
    assert clean_doctor_name(raw) == expected
