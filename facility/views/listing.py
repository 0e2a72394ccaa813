"""Shared handling of the ``q`` / ``page`` / ``pageSize`` list parameters."""
from rest_framework.response import Response

from ..serializers.common import ListQuerySerializer
from ..services.search import paginate, search


def parse_list_params(request, serializer_class=ListQuerySerializer) -> dict:
    s = serializer_class(data=request.query_params)
    s.is_valid(raise_exception=True)
    return s.validated_data


def list_response(qs, params: dict, lookups, serializer_class, *, context=None) -> Response:
    """Search, paginate and serialize ``qs``; the total goes in ``X-Total-Count``."""
    qs = search(qs, params.get('q'), lookups)
    total = qs.count()
    page = paginate(qs, params.get('page'), params.get('pageSize'))
    data = serializer_class(page, many=True, context=context or {}).data
    return Response(data, headers={'X-Total-Count': str(total)})
