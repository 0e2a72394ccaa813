"""Hospital-operations app: models, serializers, services, views and routes.

Implements the REST contract consumed by the operations dashboard
(beds, staff, medicines, inventory and disease protocols).
"""
