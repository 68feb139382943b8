"""
Models for tracking the health of air quality data sources.
"""
from django.db import models


class AdapterStatus(models.Model):
    """
    Track the health and status of each data source adapter.
    """
    source = models.CharField(max_length=50, unique=True, db_index=True)
    is_active = models.BooleanField(default=True)

    # Health metrics
    last_success_at = models.DateTimeField(null=True, blank=True)
    last_failure_at = models.DateTimeField(null=True, blank=True)
    consecutive_failures = models.IntegerField(default=0)
    total_requests = models.IntegerField(default=0)
    total_failures = models.IntegerField(default=0)

    # Status
    status_message = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Adapter Status'
        verbose_name_plural = 'Adapter Statuses'
        ordering = ['source']

    def __str__(self):
        status = "Active" if self.is_active else "Inactive"
        return f"{self.source} - {status}"

    @property
    def success_rate(self):
        """Calculate success rate as percentage."""
        if self.total_requests == 0:
            return 0
        return ((self.total_requests - self.total_failures) / self.total_requests) * 100

    @property
    def is_healthy(self):
        """Check if adapter is considered healthy."""
        if self.total_requests == 0:
            return self.is_active
        return (
            self.is_active and
            self.consecutive_failures < 5 and
            self.success_rate > 50
        )
