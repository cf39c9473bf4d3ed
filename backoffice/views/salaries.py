from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from backoffice.models import Salary
from backoffice.permissions import IsOwnerLevel
from backoffice.serializers.people import SalaryQuerySerializer, SalarySerializer
from backoffice.services.audit import log_action
from backoffice.services.salaries import create_salary, format_salary, list_salaries, update_salary
from .common import get_or_404, updated_fields


@api_view(['GET', 'POST'])
@permission_classes([IsOwnerLevel])
def salaries(request):
    if request.method == 'GET':
        q = SalaryQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        qs = list_salaries(employee_id=vd.get('employeeId'), month=vd.get('month'), year=vd.get('year'))
        return Response({'ok': True, 'data': [format_salary(x) for x in qs]})

    s = SalarySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    salary = create_salary(s.validated_data)
    log_action(user=request.user, action='salary.create', object_type='salary', object_id=salary.id,
               detail={'employeeId': salary.employee_id, 'period': f'{salary.year}-{salary.month:02d}',
                       'total': str(salary.total_salary)})
    return Response({'ok': True, 'data': format_salary(salary)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsOwnerLevel])
def salary_detail(request, pk: int):
    salary = get_or_404(Salary, pk, 'Data gaji tidak ditemukan')
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_salary(salary)})

    if request.method == 'DELETE':
        salary.delete()
        log_action(user=request.user, action='salary.delete', object_type='salary', object_id=pk)
        return Response({'ok': True})

    s = SalarySerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    update_salary(salary, s.validated_data)
    log_action(user=request.user, action='salary.update', object_type='salary', object_id=salary.id,
               detail={'fields': updated_fields(s.validated_data), 'total': str(salary.total_salary)})
    return Response({'ok': True, 'data': format_salary(salary)})
