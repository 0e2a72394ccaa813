"""
Bulk import endpoints used to seed a fresh installation from JSON files.

Each body is an array; the whole batch is validated before anything is
written, and rows that already exist are skipped.
"""
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.disease import DiseaseSerializer
from ..services import bulk


@api_view(['POST'])
def bulk_medicines(request):
    return Response(bulk.import_medicines(request.data), status=status.HTTP_201_CREATED)


@api_view(['POST'])
def bulk_inventory(request):
    return Response(bulk.import_inventory(request.data), status=status.HTTP_201_CREATED)


@api_view(['POST'])
def bulk_diseases(request):
    return Response(bulk.import_disease_names(request.data), status=status.HTTP_201_CREATED)


@api_view(['POST'])
def bulk_diseases_complex(request):
    result = bulk.import_disease_trees(request.data)
    result['diseases'] = DiseaseSerializer(result['diseases'], many=True).data
    return Response(result, status=status.HTTP_201_CREATED)


# ScopedRateThrottle reads the scope from the generated view class
for _view in (bulk_medicines, bulk_inventory, bulk_diseases, bulk_diseases_complex):
    _view.cls.throttle_scope = 'bulk'
