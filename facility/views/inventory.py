import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..models import Inventory
from ..serializers.catalog import InventorySerializer
from ..services.inventory import search_inventory
from ..services.search import paginate
from .listing import parse_list_params

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
def inventory_collection(request):
    """List stock records with their ``stockStatus`` badge, or add one.

    ``q`` matches medicine name, form, strength, batch number and the
    quantity digits.
    """
    if request.method == 'GET':
        params = parse_list_params(request)
        qs = search_inventory(Inventory.objects.select_related('medicine').order_by('id'), params.get('q'))
        total = qs.count()
        page = paginate(qs, params.get('page'), params.get('pageSize'))
        # One clock for the whole page so badges agree with each other
        context = {'now': timezone.now()}
        data = InventorySerializer(page, many=True, context=context).data
        return Response(data, headers={'X-Total-Count': str(total)})

    s = InventorySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    item = s.save()
    logger.info('inventory %s created for medicine %s (qty %s)', item.id, item.medicine_id, item.available_qty)
    return Response(InventorySerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def inventory_detail(request, pk: int):
    item = Inventory.objects.select_related('medicine').filter(pk=pk).first()
    if not item:
        raise NotFound('Inventory record not found')

    if request.method == 'GET':
        return Response(InventorySerializer(item).data)

    if request.method == 'DELETE':
        data = InventorySerializer(item).data
        item.delete()
        return Response(data)

    s = InventorySerializer(item, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    item = s.save()
    return Response(InventorySerializer(item).data)
