"""
Staff management views.

Nurses float between wards and are never attached to a department;
every other specialization must be.  The rule lives in
``StaffSerializer.validate`` so it is applied to creates and to partial
updates alike.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..models import Staff
from ..serializers.facility import StaffSerializer
from .listing import list_response, parse_list_params

logger = logging.getLogger(__name__)

STAFF_SEARCH = ('name', 'specialization', 'department__name')


def _get_staff(pk):
    return Staff.objects.select_related('department').filter(pk=pk).first()


@api_view(['GET', 'POST'])
def staff_collection(request):
    """``GET`` lists staff (``q``, ``page``, ``pageSize``); ``POST`` creates one."""
    if request.method == 'GET':
        params = parse_list_params(request)
        qs = Staff.objects.select_related('department').order_by('id')
        return list_response(qs, params, STAFF_SEARCH, StaffSerializer)

    s = StaffSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    member = s.save()
    logger.info('staff %s created (%s)', member.id, member.specialization)
    return Response(StaffSerializer(member).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def staff_detail(request, pk: int):
    member = _get_staff(pk)
    if not member:
        raise NotFound('Staff not found')

    if request.method == 'GET':
        return Response(StaffSerializer(member).data)

    if request.method == 'DELETE':
        data = StaffSerializer(member).data
        member.delete()
        logger.info('staff %s deleted', pk)
        return Response(data)

    s = StaffSerializer(member, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    member = s.save()
    return Response(StaffSerializer(member).data)
