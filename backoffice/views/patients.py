"""
Patient registry.

Any signed-in account may register and edit patients; records are never
hard-deleted through the API unless they have no treatments.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.models import Patient
from backoffice.serializers.people import PatientListQuerySerializer, PatientSerializer
from backoffice.services.audit import log_action
from backoffice.services.patients import create_patient, format_patient, list_patients, update_patient
from .common import get_or_404, updated_fields

NOT_FOUND = 'Pasien tidak ditemukan'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = list_patients(q=(q.validated_data.get('q') or '').strip() or None,
                           include_inactive=q.validated_data.get('status') == 'all')
        return Response({'ok': True, 'data': [format_patient(p) for p in qs]})

    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = create_patient(s.validated_data)
    log_action(user=request.user, action='patient.create', object_type='patient', object_id=patient.id,
               detail={'medicalRecordNumber': patient.medical_record_number})
    return Response({'ok': True, 'data': format_patient(patient)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    patient = get_or_404(Patient, pk, NOT_FOUND)
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_patient(patient)})

    if request.method == 'DELETE':
        # PROTECT on treatments turns into a 409 in the exception handler
        patient.delete()
        log_action(user=request.user, action='patient.delete', object_type='patient', object_id=pk,
                   detail={'medicalRecordNumber': patient.medical_record_number})
        return Response({'ok': True})

    s = PatientSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    update_patient(patient, s.validated_data)
    log_action(user=request.user, action='patient.update', object_type='patient', object_id=patient.id,
               detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_patient(patient)})
