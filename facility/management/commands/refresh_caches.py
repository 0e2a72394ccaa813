from django.core.management.base import BaseCommand
from django.utils import timezone

from facility.services.broadcast import broadcast_refresh
from facility.services.stats import STATS_CACHE_KEY, get_hospital_stats


class Command(BaseCommand):
    help = "Recompute cached dashboard stats and broadcast a WebSocket refresh event."

    def handle(self, *args, **options):
        now = timezone.now()
        stats = get_hospital_stats(refresh=True)
        broadcast_refresh(['stats', 'beds', 'staff', 'inventory'])
        self.stdout.write(self.style.SUCCESS(
            f"Refreshed {STATS_CACHE_KEY} at {now} "
            f"(beds={stats['beds']['total']}, inventory={stats['inventory']['totalItems']})"
        ))
