import logging
from typing import Iterable

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

logger = logging.getLogger(__name__)

UPDATES_GROUP = 'updates'


def broadcast_refresh(keys: Iterable[str]) -> None:
    """Tell connected dashboards which data sets changed."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {
        'type': 'broadcast.refresh',
        'version': int(now.timestamp()),
        'ts': now.isoformat(),
        'keys': sorted(set(keys))[:50],
    }
    try:
        async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    except Exception:
        # A missing Redis must not fail the write that triggered the refresh
        logger.warning('refresh broadcast failed', exc_info=True)
