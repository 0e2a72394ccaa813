"""
Medicine catalog views.

A catalog entry cannot be removed while a treatment protocol prescribes
it or stock records point at it; the guard reports how many references
block the delete.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..exceptions import BusinessRuleViolation
from ..models import Medicine
from ..serializers.catalog import MedicineDetailSerializer, MedicineSerializer
from ..services.references import ensure_medicine_deletable
from .listing import list_response, parse_list_params

logger = logging.getLogger(__name__)

MEDICINE_SEARCH = ('name', 'form', 'strength', 'unit')


def _medicines():
    return Medicine.objects.prefetch_related('inventory').order_by('id')


def _get_medicine(raw_pk: str) -> Medicine:
    try:
        pk = int(raw_pk)
    except (TypeError, ValueError):
        raise BusinessRuleViolation('Invalid medicine ID')
    medicine = _medicines().filter(pk=pk).first()
    if not medicine:
        raise NotFound('Medicine not found')
    return medicine


@api_view(['GET', 'POST'])
def medicine_collection(request):
    if request.method == 'GET':
        params = parse_list_params(request)
        return list_response(_medicines(), params, MEDICINE_SEARCH, MedicineDetailSerializer)

    s = MedicineSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    medicine = s.save()
    logger.info('medicine %s created', medicine.id)
    return Response(MedicineSerializer(medicine).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
def medicine_detail(request, pk: str):
    medicine = _get_medicine(pk)

    if request.method == 'GET':
        return Response(MedicineDetailSerializer(medicine).data)

    if request.method == 'DELETE':
        ensure_medicine_deletable(medicine)
        data = MedicineSerializer(medicine).data
        medicine.delete()
        logger.info('medicine %s deleted', data['id'])
        return Response(data)

    # Full replacement: every catalog field is required again
    s = MedicineSerializer(medicine, data=request.data)
    s.is_valid(raise_exception=True)
    medicine = s.save()
    return Response(MedicineSerializer(medicine).data)
