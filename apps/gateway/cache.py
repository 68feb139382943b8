"""
Reading cache backed by the database.

The cache stores ``(AQIReading, cached_at)`` pairs under a rounded
coordinate key. Freshness is decided by the caller. Writes are last writer
wins.
"""
import logging
from decimal import Decimal
from typing import Optional, Tuple

from apps.core.types import AQIReading

from .models import CachedReading

logger = logging.getLogger(__name__)


class DatabaseReadingCache:
    """Cache backed by the ``CachedReading`` table."""

    def get(self, key: str) -> Optional[Tuple[AQIReading, object]]:
        try:
            cached = CachedReading.objects.get(cache_key=key)
        except CachedReading.DoesNotExist:
            return None

        try:
            reading = AQIReading.from_dict(cached.payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            cached.delete()
            return None

        cached.increment_hit_count()
        return reading, cached.cached_at

    def put(self, key: str, reading: AQIReading, cached_at) -> None:
        _, lat, lon = key.split('_')
        CachedReading.objects.update_or_create(
            cache_key=key,
            defaults={
                'lat': Decimal(lat),
                'lon': Decimal(lon),
                'payload': reading.to_dict(),
                'aqi': reading.aqi_value,
                'source': reading.source_name,
                'cached_at': cached_at,
            }
        )

