"""
Cache invalidation and dashboard refresh hooks.

Every write to dashboard data drops the cached counters; once the
transaction commits, connected clients are told which data sets
changed.  A rebuilt disease tree touches dozens of rows, so the keys of
one transaction are coalesced into a single broadcast.
"""
import threading

from django.db import transaction
from django.db.models.signals import post_delete, post_save

from .models import (
    AgeGroup, Bed, Department, Disease, Inventory, Medicine, PrescribedMedicine, Staff, Subcategory,
)
from .services.broadcast import broadcast_refresh
from .services.stats import invalidate_hospital_stats

REFRESH_KEYS = {
    Bed: 'beds',
    Staff: 'staff',
    Department: 'departments',
    Inventory: 'inventory',
    Medicine: 'medicines',
    Disease: 'diseases',
    Subcategory: 'diseases',
    AgeGroup: 'diseases',
    PrescribedMedicine: 'diseases',
}

# Only these feed the counters in services.stats
STATS_MODELS = (Bed, Staff, Inventory)

_pending = threading.local()


class _Batch:
    """Keys changed inside one transaction, sent once it commits."""

    def __init__(self):
        self.keys = set()
        self.stats = False

    def __call__(self):
        if getattr(_pending, 'batch', None) is self:
            _pending.batch = None
        # a reader may have cached counters between the write and the commit
        if self.stats:
            invalidate_hospital_stats()
        broadcast_refresh(self.keys)


def _open_batch():
    """Batch registered on the current transaction, or None.

    Rolled-back transactions drop their commit callbacks, and the batch
    with them, so keys of aborted writes are never sent.
    """
    batch = getattr(_pending, 'batch', None)
    if batch is None:
        return None
    registered = transaction.get_connection().run_on_commit
    if any(entry[1] is batch for entry in registered):
        return batch
    return None


def _on_change(sender, **kwargs):
    is_stats = issubclass(sender, STATS_MODELS)
    if is_stats:
        invalidate_hospital_stats()
    batch = _open_batch()
    fresh = batch is None
    if fresh:
        batch = _pending.batch = _Batch()
    batch.keys.add(REFRESH_KEYS[sender])
    batch.stats = batch.stats or is_stats
    if fresh:
        # Runs at once outside a transaction
        transaction.on_commit(batch)


for _model in REFRESH_KEYS:
    post_save.connect(_on_change, sender=_model, dispatch_uid=f'refresh-save-{_model.__name__}')
    post_delete.connect(_on_change, sender=_model, dispatch_uid=f'refresh-delete-{_model.__name__}')
