# billing/admin.py
"""
Django admin configuration for billing models.
Order and enrollment dashboards with CSV export.
"""

import csv
from django.contrib import admin
from django.http import HttpResponse
from django.utils.html import format_html

from .models import Order, Enrollment
from .services.enrollment_service import expire_overdue_enrollments

# ============================================================================
# COMMON ACTIONS
# ============================================================================

def export_as_csv(modeladmin, request, queryset):
    """Export selected rows to CSV."""
    meta = modeladmin.model._meta
    field_names = [field.name for field in meta.fields]

    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="{meta.model_name}.csv"'
    writer = csv.writer(response)

    writer.writerow(field_names)
    for obj in queryset:
        writer.writerow([getattr(obj, f) for f in field_names])

    return response


export_as_csv.short_description = "Export selected to CSV"


def _badge(color, label):
    return format_html('<b style="color:{}">{}</b>', color, label)


# ============================================================================
# ORDERS
# ============================================================================

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "buyer",
        "program",
        "coach",
        "amount_display",
        "status_badge",
        "created_at",
    ]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "payment_key", "buyer__email", "coach__email", "program__title"]
    readonly_fields = ["id", "payment_key", "created_at", "updated_at"]
    ordering = ["-created_at"]
    actions = [export_as_csv]

    def amount_display(self, obj):
        return f"{obj.amount:,.0f} KRW"
    amount_display.short_description = "Amount"

    def status_badge(self, obj):
        colors = {
            Order.Status.PENDING: "orange",
            Order.Status.COMPLETED: "green",
            Order.Status.CANCELLED: "red",
        }
        return _badge(colors.get(obj.status, "black"), obj.get_status_display())
    status_badge.short_description = "Status"


# ============================================================================
# ENROLLMENTS
# ============================================================================

@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "program", "status_badge", "start_date", "end_date"]
    list_filter = ["status", "start_date", "end_date"]
    search_fields = ["user__email", "user__full_name", "program__title"]
    readonly_fields = ["id", "order", "created_at", "updated_at"]
    ordering = ["-created_at"]
    actions = [export_as_csv, "expire_overdue"]

    def status_badge(self, obj):
        colors = {
            Enrollment.Status.ACTIVE: "green",
            Enrollment.Status.EXPIRED: "gray",
            Enrollment.Status.PAUSED: "orange",
        }
        return _badge(colors.get(obj.status, "black"), obj.get_status_display())
    status_badge.short_description = "Status"

    @admin.action(description="Expire all overdue enrollments")
    def expire_overdue(self, request, queryset):
        count = expire_overdue_enrollments()
        self.message_user(request, f"Expired {count} enrollment(s).")
