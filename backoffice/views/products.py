from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.models import FieldTripProduct, Product
from backoffice.permissions import IsStaffLevel, StaffWriteOrReadOnly
from backoffice.serializers.catalog import FieldTripProductSerializer, ProductSerializer
from backoffice.services.audit import log_action
from backoffice.services.products import (
    FIELD_TRIP_PRODUCT_FIELDS, PRODUCT_FIELDS, active_products, apply_fields, create_from,
    format_field_trip_product, format_product, medication_products, treatment_products,
)
from .common import get_or_404, updated_fields


@api_view(['GET', 'POST'])
@permission_classes([StaffWriteOrReadOnly])
def products(request):
    if request.method == 'GET':
        return Response({'ok': True, 'data': [format_product(p) for p in active_products()]})

    s = ProductSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    product = create_from(Product, s.validated_data, PRODUCT_FIELDS)
    log_action(user=request.user, action='product.create', object_type='product', object_id=product.id,
               detail={'name': product.name})
    return Response({'ok': True, 'data': format_product(product)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([StaffWriteOrReadOnly])
def product_detail(request, pk: int):
    product = get_or_404(Product, pk, 'Produk tidak ditemukan')
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_product(product)})

    if request.method == 'DELETE':
        product.delete()
        log_action(user=request.user, action='product.delete', object_type='product', object_id=pk,
                   detail={'name': product.name})
        return Response({'ok': True})

    s = ProductSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    apply_fields(product, s.validated_data, PRODUCT_FIELDS)
    log_action(user=request.user, action='product.update', object_type='product', object_id=product.id,
               detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_product(product)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def treatment_product_list(request):
    return Response({'ok': True, 'data': [format_product(p) for p in treatment_products()]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def medication_product_list(request):
    return Response({'ok': True, 'data': [format_product(p) for p in medication_products()]})


@api_view(['GET', 'POST'])
@permission_classes([IsStaffLevel])
def field_trip_products(request):
    if request.method == 'GET':
        qs = FieldTripProduct.objects.all()
        if request.query_params.get('active') in ('1', 'true'):
            qs = qs.filter(is_active=True)
        return Response({'ok': True, 'data': [format_field_trip_product(p) for p in qs]})

    s = FieldTripProductSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    product = create_from(FieldTripProduct, s.validated_data, FIELD_TRIP_PRODUCT_FIELDS)
    log_action(user=request.user, action='field_trip_product.create', object_type='field_trip_product',
               object_id=product.id, detail={'name': product.name})
    return Response({'ok': True, 'data': format_field_trip_product(product)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsStaffLevel])
def field_trip_product_detail(request, pk: int):
    product = get_or_404(FieldTripProduct, pk, 'Produk field trip tidak ditemukan')
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_field_trip_product(product)})

    if request.method == 'DELETE':
        product.delete()
        log_action(user=request.user, action='field_trip_product.delete', object_type='field_trip_product',
                   object_id=pk, detail={'name': product.name})
        return Response({'ok': True})

    s = FieldTripProductSerializer(product, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    apply_fields(product, s.validated_data, FIELD_TRIP_PRODUCT_FIELDS)
    log_action(user=request.user, action='field_trip_product.update', object_type='field_trip_product',
               object_id=product.id, detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_field_trip_product(product)})
