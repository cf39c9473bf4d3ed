"""
Treatment records and doctor fee rules.

Doctor accounts below staff level are scoped to their own linked
doctor: they only see, and may only record, their own treatments.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.access import STAFF, security_level
from backoffice.models import FeeSetting
from backoffice.permissions import OwnerWriteOrReadOnly
from backoffice.serializers.catalog import FeeCalculationSerializer, FeeSettingSerializer
from backoffice.serializers.transactions import TreatmentQuerySerializer, TreatmentSerializer
from backoffice.services.audit import log_action
from backoffice.services.fee_settings import (
    create_fee_setting, format_fee_setting, list_fee_settings, update_fee_setting,
)
from backoffice.services.treatments import (
    create_treatment, delete_treatment, fee_preview, filter_treatments, format_treatment, get_treatment,
    update_treatment, visible_treatments,
)
from .common import get_or_404, updated_fields


def _check_own_doctor(user, doctor_id):
    if getattr(user, 'role', '') == 'doctor' and security_level(user) < STAFF and doctor_id != user.doctor_id:
        raise PermissionDenied('Dokter hanya dapat mencatat tindakan miliknya sendiri')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def treatments(request):
    if request.method == 'GET':
        q = TreatmentQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        qs = filter_treatments(
            visible_treatments(request.user),
            doctor_id=vd.get('doctorId'), patient_id=vd.get('patientId'),
            start=vd.get('start'), end=vd.get('end'), payment_status=vd.get('paymentStatus'),
        )
        return Response({'ok': True, 'data': [format_treatment(t) for t in qs]})

    s = TreatmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    _check_own_doctor(request.user, s.validated_data['doctorId'])
    t = create_treatment(s.validated_data, user=request.user)
    log_action(user=request.user, action='treatment.create', object_type='treatment', object_id=t.id,
               detail={'doctorId': t.doctor_id, 'patientId': t.patient_id,
                       'total': str(t.total_amount), 'voucher': t.voucher_code or None})
    return Response({'ok': True, 'data': format_treatment(t)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def treatment_detail(request, pk: int):
    t = get_treatment(request.user, pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_treatment(t)})

    if request.method == 'DELETE':
        delete_treatment(t)
        log_action(user=request.user, action='treatment.delete', object_type='treatment', object_id=pk,
                   detail={'doctorId': t.doctor_id, 'patientId': t.patient_id})
        return Response({'ok': True})

    s = TreatmentSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    if 'doctorId' in s.validated_data:
        _check_own_doctor(request.user, s.validated_data['doctorId'])
    update_treatment(t, s.validated_data)
    log_action(user=request.user, action='treatment.update', object_type='treatment', object_id=t.id,
               detail={'fields': updated_fields(s.validated_data), 'total': str(t.total_amount)})
    return Response({'ok': True, 'data': format_treatment(t)})


@api_view(['GET', 'POST'])
@permission_classes([OwnerWriteOrReadOnly])
def fee_settings(request):
    if request.method == 'GET':
        return Response({'ok': True, 'data': [format_fee_setting(x) for x in list_fee_settings()]})

    s = FeeSettingSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    rule = create_fee_setting(s.validated_data)
    log_action(user=request.user, action='fee_setting.create', object_type='fee_setting', object_id=rule.id,
               detail={'feePercentage': str(rule.fee_percentage), 'isDefault': rule.is_default})
    return Response({'ok': True, 'data': format_fee_setting(rule)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([OwnerWriteOrReadOnly])
def fee_setting_detail(request, pk: int):
    rule = get_or_404(FeeSetting, pk, 'Aturan fee tidak ditemukan')
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_fee_setting(rule)})

    if request.method == 'DELETE':
        rule.delete()
        log_action(user=request.user, action='fee_setting.delete', object_type='fee_setting', object_id=pk)
        return Response({'ok': True})

    s = FeeSettingSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    update_fee_setting(rule, s.validated_data)
    log_action(user=request.user, action='fee_setting.update', object_type='fee_setting', object_id=rule.id,
               detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_fee_setting(rule)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def fee_settings_calculate(request):
    """Preview the doctor fee for a set of items; nothing is saved."""
    s = FeeCalculationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response({'ok': True, 'data': fee_preview(s.validated_data)})
