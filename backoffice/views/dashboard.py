from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.permissions import IsOwnerLevel
from backoffice.serializers.common import DoctorFeeQuerySerializer
from backoffice.services.reports import dashboard_summary, doctor_fee_report
from backoffice.services.treatments import visible_treatments


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Today's figures; treatment numbers follow the caller's visibility."""
    return Response({'ok': True, 'data': dashboard_summary(visible_treatments(request.user))})


@api_view(['GET'])
@permission_classes([IsOwnerLevel])
def doctor_fees(request):
    q = DoctorFeeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    return Response({'ok': True, 'data': doctor_fee_report(vd.get('start'), vd.get('end'), vd.get('doctorId'))})
