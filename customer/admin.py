from django.contrib import admin

from .models import ShippingAddress


@admin.register(ShippingAddress)
class ShippingAddressAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "title", "address_type", "city", "state", "zip_code", "country")
    list_filter = ("address_type", "country")
    search_fields = ("title", "street", "city", "zip_code", "user__email", "user__username")
    ordering = ("-updated_at", "id")
    list_select_related = ("user",)
