"""
Dashboard figures and the doctor fee report.
"""
from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Optional

from django.db.models import Count, Sum
from django.utils import timezone

from backoffice.models import Doctor, Employee, FieldTripSale, Patient, Product, Treatment
from .pricing import ZERO, money, to_decimal


def dashboard_summary(treatments=None) -> dict:
    today = timezone.localdate()
    treatments = treatments if treatments is not None else Treatment.objects.all()
    today_qs = treatments.filter(date=today)
    today_agg = today_qs.aggregate(n=Count('id'), revenue=Sum('total_amount'))
    low_stock = [
        {'id': p.id, 'name': p.name, 'stock': p.stock, 'minStock': p.min_stock}
        for p in Product.objects.filter(status='aktif') if p.low_stock
    ]
    outstanding_treatments = treatments.filter(payment_status='dp').aggregate(s=Sum('outstanding_amount'))['s']
    outstanding_trips = (FieldTripSale.objects.filter(payment_status='dp')
                         .exclude(status='cancelled').aggregate(s=Sum('outstanding_amount'))['s'])
    return {
        'activePatients': Patient.objects.filter(status='aktif').count(),
        'activeDoctors': Doctor.objects.filter(is_active=True).count(),
        'activeEmployees': Employee.objects.filter(status='aktif').count(),
        'treatmentsToday': today_agg['n'] or 0,
        'revenueToday': money(today_agg['revenue']),
        'outstandingTreatments': money(outstanding_treatments),
        'outstandingFieldTrips': money(outstanding_trips),
        'lowStockProducts': low_stock,
    }


def doctor_fee_report(start=None, end=None, doctor_id: Optional[int] = None) -> dict:
    """Treatment fees plus field-trip fees per doctor within [start, end]."""
    rows: dict[int, dict] = {}

    def row_for(did, name) -> dict:
        if did not in rows:
            rows[did] = {
                'doctorId': did, 'doctorName': name,
                'treatmentCount': 0, 'treatmentRevenue': ZERO, 'treatmentFees': ZERO,
                'fieldTripCount': 0, 'fieldTripFees': ZERO,
            }
        return rows[did]

    tq = Treatment.objects.all()
    if start:
        tq = tq.filter(date__gte=start)
    if end:
        tq = tq.filter(date__lte=end)
    if doctor_id:
        tq = tq.filter(doctor_id=doctor_id)
    for r in tq.order_by().values('doctor_id', 'doctor_name').annotate(
            n=Count('id'), revenue=Sum('total_nominal'), fees=Sum('calculated_fee')):
        row = row_for(r['doctor_id'], r['doctor_name'])
        row['treatmentCount'] += r['n']
        row['treatmentRevenue'] += r['revenue'] or ZERO
        row['treatmentFees'] += r['fees'] or ZERO

    sq = FieldTripSale.objects.exclude(status='cancelled')
    if start:
        sq = sq.filter(sale_date__gte=start)
    if end:
        sq = sq.filter(sale_date__lte=end)
    trip_fees: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for sale in sq.only('selected_doctors'):
        for entry in sale.selected_doctors or []:
            did = entry.get('doctorId')
            if doctor_id and did != doctor_id:
                continue
            row = row_for(did, entry.get('doctorName') or '')
            row['fieldTripCount'] += 1
            trip_fees[did] += to_decimal(entry.get('fee'))
    for did, fee in trip_fees.items():
        rows[did]['fieldTripFees'] += fee

    out = []
    for row in rows.values():
        total = row['treatmentFees'] + row['fieldTripFees']
        out.append({
            **row,
            'treatmentRevenue': money(row['treatmentRevenue']),
            'treatmentFees': money(row['treatmentFees']),
            'fieldTripFees': money(row['fieldTripFees']),
            'totalFees': money(total),
        })
    out.sort(key=lambda r: r['totalFees'], reverse=True)
    return {
        'start': start.isoformat() if start else None,
        'end': end.isoformat() if end else None,
        'rows': out,
        'grandTotal': round(sum(r['totalFees'] for r in out), 2),
    }
