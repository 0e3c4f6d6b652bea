"""Discount URL routes (v1)."""

from django.urls import path

from .views import DiscountPreviewView

app_name = "discounts"

urlpatterns = [
    path("preview/", DiscountPreviewView.as_view(), name="discount-preview"),
]
