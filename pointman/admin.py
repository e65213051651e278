"""Pointman admin - read-only view of the grant ledger."""

from django.contrib import admin
from django.utils.html import format_html

from pointman.models import GrantRecord


@admin.register(GrantRecord)
class GrantRecordAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "payer",
        "points_display",
        "remainder",
        "created_at",
        "updated_at",
    ]
    search_fields = ["payer"]
    readonly_fields = ["payer", "points", "remainder", "created_at", "updated_at"]
    date_hierarchy = "created_at"
    ordering = ["-created_at", "-id"]

    # Ledger rows are written by LedgerService only and never deleted.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def points_display(self, obj):
        if obj.points > 0:
            return format_html('<span style="color:green">+{}</span>', obj.points)
        return format_html('<span style="color:red">{}</span>', obj.points)

    points_display.short_description = "Points"
