"""Department CRUD; a department still holding beds or staff cannot be removed."""
import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..models import Department
from ..serializers.facility import DepartmentSerializer
from ..services.references import ensure_department_deletable
from .listing import list_response, parse_list_params

logger = logging.getLogger(__name__)


def _departments():
    return Department.objects.prefetch_related('staff', 'beds').order_by('id')


@api_view(['GET', 'POST'])
def department_collection(request):
    if request.method == 'GET':
        params = parse_list_params(request)
        return list_response(_departments(), params, ('name',), DepartmentSerializer)

    s = DepartmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    department = s.save()
    logger.info('department %s created', department.id)
    return Response(DepartmentSerializer(department).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def department_detail(request, pk: int):
    department = _departments().filter(pk=pk).first()
    if not department:
        raise NotFound('Department not found')

    if request.method == 'GET':
        return Response(DepartmentSerializer(department).data)

    if request.method == 'DELETE':
        ensure_department_deletable(department)
        data = DepartmentSerializer(department).data
        department.delete()
        logger.info('department %s deleted', pk)
        return Response(data)

    s = DepartmentSerializer(department, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    s.save()
    return Response(DepartmentSerializer(_departments().get(pk=pk)).data)
