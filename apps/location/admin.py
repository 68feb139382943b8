"""
Admin configuration for location models.
"""
from django.contrib import admin
from .models import LocationCache


@admin.register(LocationCache)
class LocationCacheAdmin(admin.ModelAdmin):
    list_display = ['postal_code', 'lat', 'lon', 'formatted_address', 'hit_count', 'cached_at']
    list_filter = ['cached_at']
    search_fields = ['postal_code', 'formatted_address']
    readonly_fields = ['created_at', 'updated_at', 'cached_at', 'hit_count']
    ordering = ['-cached_at']
