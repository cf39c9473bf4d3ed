from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from backoffice.models import Employee
from backoffice.permissions import IsStaffLevel
from backoffice.serializers.people import EmployeeSerializer
from backoffice.services.audit import log_action
from backoffice.services.employees import create_employee, delete_employee, format_employee, update_employee
from .common import get_or_404, updated_fields


@api_view(['GET', 'POST'])
@permission_classes([IsStaffLevel])
def employees(request):
    if request.method == 'GET':
        qs = Employee.objects.select_related('account')
        status_filter = request.query_params.get('status')
        if status_filter in ('aktif', 'nonaktif'):
            qs = qs.filter(status=status_filter)
        return Response({'ok': True, 'data': [format_employee(e) for e in qs]})

    s = EmployeeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    employee = create_employee(data, password=data.pop('password', None) or None)
    log_action(user=request.user, action='employee.create', object_type='employee', object_id=employee.id,
               detail={'name': employee.name, 'withLogin': bool(s.validated_data.get('password'))})
    return Response({'ok': True, 'data': format_employee(employee)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsStaffLevel])
def employee_detail(request, pk: int):
    employee = get_or_404(Employee, pk, 'Karyawan tidak ditemukan')
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_employee(employee)})

    if request.method == 'DELETE':
        delete_employee(employee)
        log_action(user=request.user, action='employee.delete', object_type='employee', object_id=pk,
                   detail={'name': employee.name})
        return Response({'ok': True})

    s = EmployeeSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    update_employee(employee, s.validated_data)
    log_action(user=request.user, action='employee.update', object_type='employee', object_id=employee.id,
               detail={'fields': updated_fields(s.validated_data)})
    return Response({'ok': True, 'data': format_employee(employee)})
