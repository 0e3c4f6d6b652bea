"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Product, ProductVariant


class ProductVariantInline(admin.TabularInline):
    model = ProductVariant
    extra = 0
    fields = ("sku", "size", "color", "price", "status")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "status", "base_price")
    search_fields = ("title", "slug")
    list_filter = ("status",)
    prepopulated_fields = {"slug": ("title",)}
    inlines = [ProductVariantInline]


@admin.register(ProductVariant)
class ProductVariantAdmin(admin.ModelAdmin):
    list_display = ("product", "sku", "size", "color", "status", "price")
    search_fields = ("sku", "product__title")
    list_filter = ("status",)
    list_select_related = ("product",)
