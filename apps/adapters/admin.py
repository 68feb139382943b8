"""
Admin configuration for adapter models.
"""
from django.contrib import admin
from .models import AdapterStatus


@admin.register(AdapterStatus)
class AdapterStatusAdmin(admin.ModelAdmin):
    list_display = ['source', 'is_active', 'success_rate_display', 'consecutive_failures', 'last_success_at', 'last_failure_at']
    list_filter = ['is_active', 'last_success_at', 'last_failure_at']
    search_fields = ['source', 'status_message']
    readonly_fields = ['created_at', 'updated_at', 'success_rate']
    ordering = ['source']

    def success_rate_display(self, obj):
        return f"{obj.success_rate:.1f}%"
    success_rate_display.short_description = 'Success Rate'
