"""
URL mappings for the operations dashboard API.

Paths mirror the ones the dashboard client calls: management routes
under ``/v1/web``, seeding routes under ``/v1/bulk``, with no trailing
slash.
"""
from django.urls import include, path

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view
from .views import beds, bulk, departments, diseases, health, hospital, inventory, medicines, staff

web_patterns = [
    path('staff', staff.staff_collection, name='staff-list'),
    path('staff/<int:pk>', staff.staff_detail, name='staff-detail'),
    path('departments', departments.department_collection, name='department-list'),
    path('departments/<int:pk>', departments.department_detail, name='department-detail'),
    path('beds', beds.bed_collection, name='bed-list'),
    path('beds/<int:pk>', beds.bed_detail, name='bed-detail'),
    path('medicines', medicines.medicine_collection, name='medicine-list'),
    # str so a non-numeric id is answered with 400 rather than 404
    path('medicines/<str:pk>', medicines.medicine_detail, name='medicine-detail'),
    path('inventory', inventory.inventory_collection, name='inventory-list'),
    path('inventory/<int:pk>', inventory.inventory_detail, name='inventory-detail'),
    path('diseases', diseases.disease_collection, name='disease-list'),
    path('diseases/<int:pk>', diseases.disease_detail, name='disease-detail'),
    path('disease/<int:pk>', diseases.disease_delete_legacy, name='disease-delete-legacy'),
    path('hospital', hospital.hospital_overview, name='hospital-overview'),
    path('stats', hospital.hospital_stats, name='hospital-stats'),
    path('alerts', hospital.predictive_alerts, name='predictive-alerts'),
]

bulk_patterns = [
    path('medicines', bulk.bulk_medicines, name='bulk-medicines'),
    path('inventory', bulk.bulk_inventory, name='bulk-inventory'),
    path('diseases', bulk.bulk_diseases, name='bulk-diseases'),
    path('diseases/complex', bulk.bulk_diseases_complex, name='bulk-diseases-complex'),
]

auth_patterns = [
    path('login', login_view, name='login_view'),
    path('refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('logout', jwt_logout_view, name='jwt_logout_view'),
]

urlpatterns = [
    path('v1/web/', include(web_patterns)),
    path('v1/bulk/', include(bulk_patterns)),
    path('v1/auth/', include(auth_patterns)),
    path('healthz', health.healthz, name='healthz'),
    path('', include('django_prometheus.urls')),
]
