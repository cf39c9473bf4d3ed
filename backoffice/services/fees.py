"""
Multi-treatment doctor fee calculator.

For every treatment item the best matching fee rule is picked by a linear
scan with additive scoring; a manual per-item override always wins.  The
calculator is pure: callers pass in the rules (see :func:`rules_from_db`)
and a product-name to category map so it can be exercised without a
database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from .pricing import to_decimal, quantize

ZERO = Decimal('0')
HUNDRED = Decimal('100')

# score weights
SCORE_DOCTOR_AND_TREATMENT = 100
SCORE_DOCTOR = 50
SCORE_TREATMENT = 40
SCORE_CATEGORY = 30
SCORE_DEFAULT = 10
SPECIFIC_BONUS = 5
SPECIFIC_MARKER = 'spesifik'

NO_RULE_DESCRIPTION = 'Tidak ada aturan fee yang cocok'


@dataclass
class FeeRule:
    id: Any
    fee_percentage: Decimal
    doctor_ids: list[str] = field(default_factory=list)
    doctor_names: list[str] = field(default_factory=list)
    treatment_types: list[str] = field(default_factory=list)
    category: str = ''
    is_default: bool = False
    description: str = ''

    def lists_doctor(self, doctor_id) -> bool:
        return str(doctor_id) in self.doctor_ids

    def lists_treatment(self, name: str) -> bool:
        return name in self.treatment_types


@dataclass
class FeeItem:
    id: str
    name: str
    price: Decimal
    final_price: Decimal


@dataclass
class ItemFee:
    item_id: str
    name: str
    amount: Decimal
    fee_base: Decimal
    fee_percentage: Decimal
    fee_amount: Decimal
    rule_id: Any
    description: str
    is_manual_override: bool = False

    def as_dict(self) -> dict:
        return {
            'itemId': self.item_id,
            'name': self.name,
            'amount': float(self.amount),
            'feeBase': float(self.fee_base),
            'feePercentage': float(self.fee_percentage),
            'feeAmount': float(self.fee_amount),
            'ruleId': self.rule_id,
            'description': self.description,
            'isManualOverride': self.is_manual_override,
        }


@dataclass
class FeeCalculation:
    items: list[ItemFee] = field(default_factory=list)
    total_treatment_amount: Decimal = ZERO
    total_fee_amount: Decimal = ZERO
    has_conflicts: bool = False
    has_manual_overrides: bool = False

    @property
    def average_fee_percentage(self) -> Decimal:
        if self.total_treatment_amount <= 0:
            return ZERO
        return quantize(self.total_fee_amount / self.total_treatment_amount * HUNDRED)

    def as_dict(self) -> dict:
        return {
            'treatmentFees': [i.as_dict() for i in self.items],
            'totalTreatmentAmount': float(self.total_treatment_amount),
            'totalFeeAmount': float(self.total_fee_amount),
            'hasConflicts': self.has_conflicts,
            'hasManualOverrides': self.has_manual_overrides,
            'averageFeePercentage': float(self.average_fee_percentage),
        }


def _fmt_pct(value: Decimal) -> str:
    return format(value.normalize(), 'f')


def score_rule(rule: FeeRule, doctor_id, item_name: str, category: Optional[str]) -> int:
    """Score of ``rule`` for the item, 0 when it does not apply."""
    if rule.doctor_ids and not rule.lists_doctor(doctor_id) and not rule.is_default:
        return 0
    applies_to_treatment = not rule.treatment_types or rule.lists_treatment(item_name)
    category_matches = bool(rule.category) and rule.category == category
    if not (applies_to_treatment or rule.is_default or category_matches):
        return 0

    if rule.lists_doctor(doctor_id) and rule.lists_treatment(item_name):
        score = SCORE_DOCTOR_AND_TREATMENT
    elif rule.lists_doctor(doctor_id):
        score = SCORE_DOCTOR
    elif rule.lists_treatment(item_name):
        score = SCORE_TREATMENT
    elif category_matches:
        score = SCORE_CATEGORY
    elif rule.is_default:
        score = SCORE_DEFAULT
    else:
        score = 0
    if SPECIFIC_MARKER in (rule.description or '').lower():
        score += SPECIFIC_BONUS
    return score


def find_best_rule(doctor_id, item_name: str, rules: Iterable[FeeRule],
                   categories: Optional[Mapping[str, str]] = None) -> Optional[FeeRule]:
    """Highest scoring rule; on a tie the earlier rule is kept."""
    category = (categories or {}).get(item_name)
    best, best_score = None, 0
    for rule in rules:
        score = score_rule(rule, doctor_id, item_name, category)
        if score > best_score:
            best, best_score = rule, score
    return best


def describe_rule(rule: FeeRule) -> str:
    pct = _fmt_pct(rule.fee_percentage)
    if rule.is_default:
        text = f'Default: {pct}%'
    else:
        parts = []
        if rule.doctor_names:
            parts.append('Dokter: ' + ', '.join(rule.doctor_names))
        if rule.treatment_types:
            parts.append('Tindakan: ' + ', '.join(rule.treatment_types))
        if rule.category:
            parts.append('Kategori: ' + rule.category)
        text = f"{' + '.join(parts) or 'Aturan'}: {pct}%"
    if rule.description:
        text += f' ({rule.description})'
    return text


def parse_override(value) -> Optional[Decimal]:
    """Return a valid 0..100 override, ``None`` for empty or invalid input."""
    if value is None or value == '':
        return None
    try:
        pct = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not pct.is_finite() or pct < 0 or pct > HUNDRED:
        return None
    return pct


def calculate_fees(doctor_id, items: Iterable[FeeItem], rules: Iterable[FeeRule], *,
                   categories: Optional[Mapping[str, str]] = None,
                   payment_status: str = 'lunas', dp_amount: Any = 0,
                   overrides: Optional[Mapping[str, Any]] = None) -> FeeCalculation:
    items = list(items)
    rules = list(rules)
    result = FeeCalculation()
    if not doctor_id or not items:
        return result

    total = sum((i.final_price for i in items), ZERO)
    dp = to_decimal(dp_amount) if payment_status == 'dp' else ZERO
    overrides = overrides or {}

    for item in items:
        base = item.final_price
        if dp > 0 and total > 0:
            base = max(ZERO, item.final_price - item.final_price / total * dp)

        manual = parse_override(overrides.get(item.id))
        if manual is not None:
            pct, rule_id, desc = manual, None, f'Manual override: {_fmt_pct(manual)}%'
            result.has_manual_overrides = True
        else:
            rule = find_best_rule(doctor_id, item.name, rules, categories)
            if rule is None:
                pct, rule_id, desc = ZERO, None, NO_RULE_DESCRIPTION
                result.has_conflicts = True
            else:
                pct, rule_id, desc = rule.fee_percentage, rule.id, describe_rule(rule)

        fee = quantize(base * pct / HUNDRED)
        result.items.append(ItemFee(
            item_id=item.id, name=item.name, amount=item.final_price,
            fee_base=quantize(base), fee_percentage=pct, fee_amount=fee,
            rule_id=rule_id, description=desc, is_manual_override=manual is not None,
        ))
        result.total_treatment_amount += item.final_price
        result.total_fee_amount += fee
    return result


def rules_from_db(queryset=None) -> list[FeeRule]:
    from ..models import FeeSetting

    qs = queryset if queryset is not None else FeeSetting.objects.all()
    rules = []
    for s in qs.prefetch_related('doctors'):
        doctors = list(s.doctors.all())
        rules.append(FeeRule(
            id=s.id,
            fee_percentage=to_decimal(s.fee_percentage),
            doctor_ids=[str(d.id) for d in doctors],
            doctor_names=[d.name for d in doctors],
            treatment_types=[str(t) for t in (s.treatment_types or [])],
            category=s.category or '',
            is_default=s.is_default,
            description=s.description or '',
        ))
    return rules


def product_categories(names: Iterable[str]) -> dict[str, str]:
    from ..models import Product

    names = [n for n in set(names) if n]
    if not names:
        return {}
    return dict(Product.objects.filter(name__in=names).values_list('name', 'category'))
