import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..models import Bed
from ..serializers.common import BedListQuerySerializer
from ..serializers.facility import BedSerializer
from .listing import list_response, parse_list_params

logger = logging.getLogger(__name__)

BED_SEARCH = ('type', 'status', 'department__name')


@api_view(['GET', 'POST'])
def bed_collection(request):
    """``GET`` lists beds (``q``, ``status``, ``page``, ``pageSize``); ``POST`` creates one."""
    if request.method == 'GET':
        params = parse_list_params(request, BedListQuerySerializer)
        qs = Bed.objects.select_related('department').order_by('id')
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        return list_response(qs, params, BED_SEARCH, BedSerializer)

    s = BedSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bed = s.save()
    logger.info('bed %s created in department %s', bed.id, bed.department_id)
    return Response(BedSerializer(bed).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def bed_detail(request, pk: int):
    bed = Bed.objects.select_related('department').filter(pk=pk).first()
    if not bed:
        raise NotFound('Bed not found')

    if request.method == 'GET':
        return Response(BedSerializer(bed).data)

    if request.method == 'DELETE':
        data = BedSerializer(bed).data
        bed.delete()
        return Response(data)

    s = BedSerializer(bed, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    bed = s.save()
    return Response(BedSerializer(bed).data)
