"""
Admin configuration for gateway models.
"""
from django.contrib import admin
from .models import CachedReading


@admin.register(CachedReading)
class CachedReadingAdmin(admin.ModelAdmin):
    list_display = ['cache_key', 'aqi', 'source', 'hit_count', 'cached_at']
    list_filter = ['source', 'cached_at']
    search_fields = ['cache_key']
    readonly_fields = ['created_at', 'updated_at', 'hit_count']
    ordering = ['-cached_at']
