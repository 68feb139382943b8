"""
Models for the read-through air quality reading cache.
"""
from django.db import models
from apps.core.models import TimeStampedModel


class CachedReading(TimeStampedModel):
    """
    Last resolved reading for a rounded query coordinate.
    """
    # Cache key, e.g. aqi_28.6364_77.2011
    cache_key = models.CharField(max_length=64, unique=True, db_index=True)

    # Location (rounded)
    lat = models.DecimalField(max_digits=9, decimal_places=6)
    lon = models.DecimalField(max_digits=9, decimal_places=6)

    # Reading payload as produced by AQIReading.to_dict()
    payload = models.JSONField(default=dict)
    aqi = models.IntegerField()
    source = models.CharField(max_length=100)

    # Timestamps
    cached_at = models.DateTimeField(db_index=True)

    # Cache stats
    hit_count = models.IntegerField(default=0)

    class Meta:
        verbose_name = 'Cached Reading'
        verbose_name_plural = 'Cached Readings'
        indexes = [
            models.Index(fields=['lat', 'lon'], name='gateway_reading_latlon_idx'),
            models.Index(fields=['-cached_at'], name='gateway_reading_cached_idx'),
        ]

    def __str__(self):
        return f"AQI {self.aqi} at ({self.lat}, {self.lon}) - {self.source}"

    def increment_hit_count(self):
        """Increment cache hit counter."""
        self.hit_count += 1
        self.save(update_fields=['hit_count'])
