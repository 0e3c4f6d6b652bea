"""URL routes for the customer app."""

from django.urls import path

from .views import AddressDetailView, AddressListCreateView

app_name = "customer"

urlpatterns = [
    path("addresses/", AddressListCreateView.as_view(), name="address-list-create"),
    path("addresses/<int:pk>/", AddressDetailView.as_view(), name="address-detail"),
]
