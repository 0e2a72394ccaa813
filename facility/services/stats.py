"""
Dashboard counters for beds, staff and inventory.

The dashboard used to derive these from the full lists on every poll;
they are computed here with aggregate queries and cached for
``STATS_CACHE_SECONDS``.  Writes to the underlying tables drop the
cache entry (see ``facility.signals``).
"""
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Q
from django.utils import timezone

from facility.models import Bed, Inventory, Staff
from facility.services.inventory import expiry_horizon

STATS_CACHE_KEY = 'stats:hospital'


def compute_hospital_stats(now=None) -> dict:
    now = now or timezone.now()
    beds = Bed.objects.aggregate(
        total=Count('id'),
        occupied=Count('id', filter=Q(status=Bed.STATUS_OCCUPIED)),
        available=Count('id', filter=Q(status=Bed.STATUS_FREE)),
        maintenance=Count('id', filter=Q(status=Bed.STATUS_MAINTENANCE)),
    )
    staff = Staff.objects.aggregate(
        total=Count('id'),
        available=Count('id', filter=Q(is_available=True)),
    )
    inventory = Inventory.objects.aggregate(
        totalItems=Count('id'),
        lowStock=Count('id', filter=Q(available_qty__lte=settings.INVENTORY_LOW_STOCK_THRESHOLD)),
        expiringSoon=Count('id', filter=Q(expiry_date__gt=now, expiry_date__lte=expiry_horizon(now))),
        expired=Count('id', filter=Q(expiry_date__lt=now)),
    )
    return {
        'beds': beds,
        # No shift model: everyone available counts as on duty
        'staff': {**staff, 'onDuty': staff['available']},
        'inventory': inventory,
        'generatedAt': now.isoformat(),
    }


def get_hospital_stats(*, refresh: bool = False) -> dict:
    if not refresh:
        cached: Optional[dict] = cache.get(STATS_CACHE_KEY)
        if cached:
            return cached
    payload = compute_hospital_stats()
    cache.set(STATS_CACHE_KEY, payload, settings.STATS_CACHE_SECONDS)
    return payload


def invalidate_hospital_stats() -> None:
    cache.delete(STATS_CACHE_KEY)
