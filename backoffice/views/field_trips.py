from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from backoffice.models import FieldTripSale
from backoffice.permissions import IsStaffLevel
from backoffice.serializers.transactions import FieldTripSaleQuerySerializer, FieldTripSaleSerializer
from backoffice.services.audit import log_action
from backoffice.services.field_trips import create_sale, format_sale, list_sales, update_sale
from .common import get_or_404, updated_fields


@api_view(['GET', 'POST'])
@permission_classes([IsStaffLevel])
def field_trip_sales(request):
    if request.method == 'GET':
        q = FieldTripSaleQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = list_sales(status=q.validated_data.get('status'),
                        q=(q.validated_data.get('q') or '').strip() or None)
        return Response({'ok': True, 'data': [format_sale(x) for x in qs]})

    s = FieldTripSaleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    sale = create_sale(s.validated_data, user=request.user)
    log_action(user=request.user, action='field_trip_sale.create', object_type='field_trip_sale',
               object_id=sale.id, detail={'customer': sale.customer_name, 'final': str(sale.final_amount)})
    return Response({'ok': True, 'data': format_sale(sale)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsStaffLevel])
def field_trip_sale_detail(request, pk: int):
    sale = get_or_404(FieldTripSale, pk, 'Penjualan field trip tidak ditemukan')
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_sale(sale)})

    if request.method == 'DELETE':
        sale.delete()
        log_action(user=request.user, action='field_trip_sale.delete', object_type='field_trip_sale',
                   object_id=pk, detail={'customer': sale.customer_name})
        return Response({'ok': True})

    s = FieldTripSaleSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    update_sale(sale, s.validated_data)
    log_action(user=request.user, action='field_trip_sale.update', object_type='field_trip_sale',
               object_id=sale.id, detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_sale(sale)})
