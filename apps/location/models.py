"""
Models for location resolution and caching.
"""
from django.db import models
from apps.core.models import TimeStampedModel


class LocationCache(TimeStampedModel):
    """
    Cache for PIN code geocoding results to minimize external API calls.
    """
    # Postal code (cache key)
    postal_code = models.CharField(max_length=10, unique=True, db_index=True)

    # Resolved coordinates
    lat = models.DecimalField(max_digits=9, decimal_places=6)
    lon = models.DecimalField(max_digits=9, decimal_places=6)
    formatted_address = models.TextField(blank=True)

    # Cache metadata
    cached_at = models.DateTimeField(auto_now=True, db_index=True)
    hit_count = models.IntegerField(default=0)

    class Meta:
        verbose_name = 'Location Cache'
        verbose_name_plural = 'Location Cache Entries'
        indexes = [
            models.Index(fields=['cached_at'], name='location_cache_cached_idx'),
        ]

    def __str__(self):
        return f"{self.postal_code} ({self.lat}, {self.lon})"

    def increment_hit_count(self):
        """Increment cache hit counter."""
        self.hit_count += 1
        self.save(update_fields=['hit_count'])
