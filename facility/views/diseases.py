"""
Treatment protocol (disease aggregate) views.

The request body of ``POST`` and ``PUT`` carries the complete tree;
``facility.services.diseases`` validates it and writes it atomically.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..serializers.disease import DiseaseSerializer
from ..services import diseases as disease_service
from .listing import list_response, parse_list_params

logger = logging.getLogger(__name__)


def _get_disease(pk):
    disease = disease_service.disease_queryset().filter(pk=pk).first()
    if not disease:
        raise NotFound('Disease not found')
    return disease


@api_view(['GET', 'POST'])
def disease_collection(request):
    if request.method == 'GET':
        params = parse_list_params(request)
        return list_response(
            disease_service.disease_queryset(), params, disease_service.SEARCH_LOOKUPS, DiseaseSerializer
        )

    payload = disease_service.parse_disease_payload(request.data)
    disease = disease_service.create_disease(payload)
    return Response(DiseaseSerializer(disease).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
def disease_detail(request, pk: int):
    disease = _get_disease(pk)

    if request.method == 'GET':
        return Response(DiseaseSerializer(disease).data)

    if request.method == 'DELETE':
        data = DiseaseSerializer(disease).data
        disease_service.delete_disease(disease)
        return Response(data)

    payload = disease_service.parse_disease_payload(request.data)
    disease = disease_service.replace_disease(disease, payload)
    return Response(DiseaseSerializer(disease).data)


@api_view(['DELETE'])
def disease_delete_legacy(request, pk: int):
    """``DELETE /disease/<id>``, kept for older dashboard builds."""
    disease = _get_disease(pk)
    data = DiseaseSerializer(disease).data
    disease_service.delete_disease(disease)
    return Response(data)
