from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.access import build_menu
from backoffice.models import ClinicSettings
from backoffice.permissions import IsSuperUserLevel, ReadOnly
from backoffice.serializers.catalog import ClinicSettingsSerializer
from backoffice.services.audit import log_action
from backoffice.services.clinic import clinic_payload, format_clinic, invalidate_clinic_cache, page_access_overrides

FIELD_MAP = {
    'name': 'name',
    'address': 'address',
    'phone': 'phone',
    'adminFee': 'admin_fee',
    'logoUrl': 'logo_url',
    'pageAccess': 'page_access',
}


@api_view(['GET', 'PUT'])
@permission_classes([ReadOnly | IsSuperUserLevel])
def clinic_settings(request):
    """Clinic profile; readable without login (the login screen shows it)."""
    if request.method == 'GET':
        return Response({'ok': True, 'data': clinic_payload()})

    s = ClinicSettingsSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    obj = ClinicSettings.load()
    for key, attr in FIELD_MAP.items():
        if key in s.validated_data:
            setattr(obj, attr, s.validated_data[key])
    obj.save()
    invalidate_clinic_cache()
    log_action(user=request.user, action='clinic_settings.update', object_type='clinic_settings',
               object_id=obj.pk, detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': format_clinic(obj)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def menu(request):
    return Response({'ok': True, **build_menu(request.user, page_access_overrides())})
