from django.contrib import admin, messages
from django.utils import timezone

from .models import DiscountCode


class ApplicabilityFilter(admin.SimpleListFilter):
    title = "applicability"
    parameter_name = "applicable"

    def lookups(self, request, model_admin):
        return (
            ("yes", "Applicable today"),
            ("expired", "Expired"),
        )

    def queryset(self, request, queryset):
        today = timezone.localdate()
        if self.value() == "yes":
            return queryset.filter(is_active=True, expiry_date__gte=today)
        if self.value() == "expired":
            return queryset.filter(expiry_date__lt=today)
        return queryset


@admin.register(DiscountCode)
class DiscountCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "discount_type", "discount_amount", "expiry_date", "is_active", "updated_at")
    list_filter = ("discount_type", "is_active", ApplicabilityFilter)
    search_fields = ("code",)
    ordering = ("code",)
    readonly_fields = ("created_at", "updated_at")
    actions = ["action_deactivate"]

    @admin.action(description="Deactivate selected codes")
    def action_deactivate(self, request, queryset):
        updated = queryset.update(is_active=False)
        messages.success(request, f"Deactivated {updated} code(s).")
