from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.models import Doctor
from backoffice.permissions import IsStaffLevel, StaffWriteOrReadOnly
from backoffice.serializers.people import DoctorSerializer, DoctorStatusSerializer
from backoffice.services.audit import log_action, actor_name
from backoffice.services.doctors import (
    active_doctors, create_doctor, delete_doctor, format_doctor, list_doctors, set_doctor_status, update_doctor,
)
from .common import get_or_404, updated_fields

NOT_FOUND = 'Dokter tidak ditemukan'


@api_view(['GET', 'POST'])
@permission_classes([StaffWriteOrReadOnly])
def doctors(request):
    if request.method == 'GET':
        q = (request.query_params.get('q') or '').strip() or None
        return Response({'ok': True, 'data': list_doctors(q=q)})

    s = DoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    doctor = create_doctor(data, password=data.pop('password', None))
    log_action(user=request.user, action='doctor.create', object_type='doctor', object_id=doctor.id,
               detail={'name': doctor.name, 'withLogin': bool(s.validated_data.get('password'))})
    return Response({'ok': True, 'data': format_doctor(doctor)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctors_active(request):
    """Active doctors for the treatment form (cached)."""
    return Response({'ok': True, 'data': active_doctors()})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([StaffWriteOrReadOnly])
def doctor_detail(request, pk: int):
    doctor = get_or_404(Doctor, pk, NOT_FOUND)
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_doctor(doctor)})

    if request.method == 'DELETE':
        delete_doctor(doctor)
        log_action(user=request.user, action='doctor.delete', object_type='doctor', object_id=pk,
                   detail={'name': doctor.name})
        return Response({'ok': True})

    s = DoctorSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    update_doctor(doctor, s.validated_data)
    log_action(user=request.user, action='doctor.update', object_type='doctor', object_id=doctor.id,
               detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_doctor(doctor)})


@api_view(['PATCH'])
@permission_classes([IsStaffLevel])
def doctor_status(request, pk: int):
    doctor = get_or_404(Doctor, pk, NOT_FOUND)
    s = DoctorStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    set_doctor_status(doctor, s.validated_data['isActive'], updated_by=actor_name(request.user))
    log_action(user=request.user, action='doctor.status', object_type='doctor', object_id=doctor.id,
               detail={'isActive': doctor.is_active})
    return Response({'ok': True, 'data': format_doctor(doctor)})
