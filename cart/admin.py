"""Admin registration for cart models.

Items are shown inline on the cart page for support staff.
"""

from django.contrib import admin, messages

from .models import Cart, CartItem
from .services import CartError, clear_cart


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("variant", "quantity", "created_at", "updated_at")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("variant",)


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "updated_at", "created_at")
    search_fields = ("user__username", "user__email")
    ordering = ("-updated_at",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [CartItemInline]
    list_select_related = ("user",)
    actions = ["action_clear_cart"]

    @admin.action(description="Clear cart (delete items, keep cart)")
    def action_clear_cart(self, request, queryset):
        cleared = 0
        failures = 0
        for cart in queryset.select_related("user"):
            try:
                clear_cart(user=cart.user)
                cleared += 1
            except CartError:
                failures += 1
        if cleared:
            messages.success(request, f"Cleared {cleared} cart(s).")
        if failures:
            messages.error(request, f"Failed to clear {failures} cart(s).")


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "variant", "quantity", "updated_at")
    search_fields = ("variant__sku", "cart__user__email")
    ordering = ("id",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("cart", "variant")
