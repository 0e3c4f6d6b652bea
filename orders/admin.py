from common.exceptions import DomainError
from django.contrib import admin, messages

from .models import IdempotencyKey, Order, OrderItem, Payment
from .services import cancel_order, deliver_order, ship_order


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("variant", "product_title", "variant_sku", "quantity", "unit_price")
    readonly_fields = fields
    can_delete = False


class PaymentInline(admin.StackedInline):
    model = Payment
    extra = 0
    readonly_fields = ("method", "amount", "status", "created_at", "updated_at")
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "number", "status", "user", "total_amount", "discount_code", "placed_at")
    list_filter = ("status", "placed_at")
    search_fields = ("number", "user__email", "user__username")
    date_hierarchy = "placed_at"
    readonly_fields = (
        "number",
        "placed_at",
        "status",
        "subtotal_amount",
        "discount_amount",
        "total_amount",
        "discount_code",
        "created_at",
        "updated_at",
    )
    raw_id_fields = ("user", "shipping_address")
    inlines = [OrderItemInline, PaymentInline]
    actions = ["action_ship", "action_deliver", "action_cancel"]

    def _transition(self, request, queryset, func, label: str) -> None:
        done = 0
        failures = 0
        for order in queryset:
            try:
                func(order)
                done += 1
            except DomainError:
                failures += 1
        if done:
            messages.success(request, f"{label} {done} order(s).")
        if failures:
            messages.error(request, f"{failures} order(s) could not be updated from their current status.")

    @admin.action(description="Mark as shipped")
    def action_ship(self, request, queryset):
        self._transition(request, queryset, ship_order, "Shipped")

    @admin.action(description="Mark as delivered")
    def action_deliver(self, request, queryset):
        self._transition(request, queryset, deliver_order, "Delivered")

    @admin.action(description="Cancel order")
    def action_cancel(self, request, queryset):
        self._transition(request, queryset, cancel_order, "Canceled")


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "variant", "quantity", "unit_price")
    list_filter = ("order",)
    search_fields = ("variant__sku", "product_title")


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "method", "amount", "status", "created_at")
    list_filter = ("status", "method")
    search_fields = ("order__number",)
    readonly_fields = ("order", "amount", "created_at", "updated_at")


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "scope", "path", "method", "response_code", "expires_at")
    list_filter = ("method", "response_code", "created_at")
    search_fields = ("key", "scope", "path")
    date_hierarchy = "created_at"
