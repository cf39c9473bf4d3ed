"""
Voucher CRUD plus the cashier-facing validate/use endpoints.

``validate`` answers 200 with ``valid: false`` for a voucher that cannot
be used; only a missing code is a 400.
"""
from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.models import Patient, Voucher, VoucherUsage
from backoffice.permissions import IsStaffLevel
from backoffice.serializers.catalog import VoucherSerializer, VoucherUseSerializer, VoucherValidateSerializer
from backoffice.services.audit import actor_name, log_action
from backoffice.services.vouchers import (
    FIELD_MAP, format_usage, format_voucher, use_voucher, validate_voucher, voucher_stats,
)
from .common import get_or_404, updated_fields

DUPLICATE_CODE = 'Kode voucher sudah digunakan'


def _save(voucher: Voucher, data: dict) -> Voucher:
    for key, attr in FIELD_MAP.items():
        if key in data:
            setattr(voucher, attr, data[key])
    try:
        with transaction.atomic():
            voucher.save()
    except IntegrityError:
        raise ValidationError({'code': DUPLICATE_CODE})
    return voucher


@api_view(['GET', 'POST'])
@permission_classes([IsStaffLevel])
def vouchers(request):
    if request.method == 'GET':
        return Response({'ok': True, 'data': [format_voucher(v) for v in Voucher.objects.all()]})

    s = VoucherSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    voucher = _save(Voucher(created_by=actor_name(request.user)), s.validated_data)
    log_action(user=request.user, action='voucher.create', object_type='voucher', object_id=voucher.id,
               detail={'code': voucher.code})
    return Response({'ok': True, 'data': format_voucher(voucher)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsStaffLevel])
def voucher_detail(request, pk: int):
    voucher = get_or_404(Voucher, pk, 'Voucher tidak ditemukan')
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_voucher(voucher)})

    if request.method == 'DELETE':
        voucher.delete()
        log_action(user=request.user, action='voucher.delete', object_type='voucher', object_id=pk,
                   detail={'code': voucher.code})
        return Response({'ok': True})

    s = VoucherSerializer(voucher, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    _save(voucher, s.validated_data)
    log_action(user=request.user, action='voucher.update', object_type='voucher', object_id=voucher.id,
               detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_voucher(voucher)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def voucher_validate(request):
    s = VoucherValidateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    check = validate_voucher(vd['code'], vd['treatmentAmount'], vd.get('adminFee') or 0)
    return Response({'ok': True, **check.as_dict()})

voucher_validate.cls.throttle_scope = 'voucher_validate'


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def voucher_use(request):
    s = VoucherUseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    patient = None
    if vd.get('patientId'):
        patient = get_or_404(Patient, vd['patientId'], 'Pasien tidak ditemukan')
    check, usage = use_voucher(
        vd['code'], vd['treatmentAmount'], vd.get('adminFee') or 0,
        patient=patient, patient_name=vd.get('patientName') or '',
        transaction_type=vd.get('transactionType') or 'treatment',
        transaction_id=vd.get('transactionId') or '',
        used_by=actor_name(request.user),
    )
    log_action(user=request.user, action='voucher.use', object_type='voucher', object_id=usage.voucher_id,
               detail={'code': usage.voucher_code, 'discount': str(usage.discount_amount)})
    return Response({'ok': True, **check.as_dict(), 'usage': format_usage(usage)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsStaffLevel])
def voucher_usage(request):
    qs = VoucherUsage.objects.all()
    code = (request.query_params.get('code') or '').strip().upper()
    if code:
        qs = qs.filter(voucher_code=code)
    return Response({'ok': True, 'data': [format_usage(u) for u in qs]})


@api_view(['GET'])
@permission_classes([IsStaffLevel])
def voucher_statistics(request):
    return Response({'ok': True, 'data': voucher_stats()})
