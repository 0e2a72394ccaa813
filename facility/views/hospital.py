"""
Dashboard read models: the public overview, the statistic tiles and the
predictive alerts panel.
"""
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..models import Department
from ..serializers.facility import DepartmentSerializer
from ..services import diseases as disease_service
from ..services.predictions import get_alerts
from ..services.stats import get_hospital_stats


@api_view(['GET'])
def hospital_overview(request):
    departments = Department.objects.prefetch_related('staff', 'beds').order_by('id')
    diseases = disease_service.disease_queryset()
    return Response({
        'departments': DepartmentSerializer(departments, many=True).data,
        'diseases': [disease_service.to_website_format(d) for d in diseases],
    })


@api_view(['GET'])
def hospital_stats(request):
    """Bed, staff and inventory counters.  ``?refresh=1`` bypasses the cache."""
    refresh = (request.query_params.get('refresh') or '0') in ['1', 'true', 'True']
    return Response(get_hospital_stats(refresh=refresh))


@api_view(['GET'])
def predictive_alerts(request):
    return Response(get_alerts())
