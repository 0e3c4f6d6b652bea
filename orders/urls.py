"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import (
    CheckoutView,
    OrderCancelView,
    OrderDetailView,
    OrderListView,
    OrderPaymentWebhookView,
    OrderShippingAddressView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("checkout/", CheckoutView.as_view(), name="order-checkout"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/shipping-address/", OrderShippingAddressView.as_view(), name="order-shipping-address"),
    path("<int:order_id>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
    path("webhooks/payment/", OrderPaymentWebhookView.as_view(), name="order-webhook-payment"),
]
