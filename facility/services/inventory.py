from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.db.models import CharField, Q, QuerySet
from django.db.models.functions import Cast
from django.utils import timezone

from facility.models import Inventory

STATUS_EXPIRED = 'Expired'
STATUS_EXPIRING_SOON = 'Expiring Soon'
STATUS_LOW_STOCK = 'Low Stock'
STATUS_GOOD = 'Good'


def expiry_horizon(now: datetime) -> datetime:
    return now + timedelta(days=settings.INVENTORY_EXPIRY_WINDOW_DAYS)


def is_low_stock(qty: int) -> bool:
    return qty <= settings.INVENTORY_LOW_STOCK_THRESHOLD


def stock_status(item: Inventory, *, now: Optional[datetime] = None) -> str:
    """Badge shown next to a stock record; expiry outranks quantity."""
    now = now or timezone.now()
    if item.expiry_date is not None:
        if item.expiry_date < now:
            return STATUS_EXPIRED
        if item.expiry_date <= expiry_horizon(now):
            return STATUS_EXPIRING_SOON
    if is_low_stock(item.available_qty):
        return STATUS_LOW_STOCK
    return STATUS_GOOD


def search_inventory(qs: QuerySet, term: str) -> QuerySet:
    """Substring match over medicine name/form/strength, batch number and quantity."""
    term = (term or '').strip()
    if not term:
        return qs
    qs = qs.annotate(qty_text=Cast('available_qty', output_field=CharField()))
    return qs.filter(
        Q(medicine__name__icontains=term)
        | Q(medicine__form__icontains=term)
        | Q(medicine__strength__icontains=term)
        | Q(batch_number__icontains=term)
        | Q(qty_text__contains=term)
    )
