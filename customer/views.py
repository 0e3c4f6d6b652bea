"""Customer API views for the shipping address book.

Endpoints are authenticated and scoped to the current user. Views stay thin
and delegate business rules to services/selectors.
"""

from common.exceptions import DomainError, api_error_response
from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

from .selectors import list_addresses
from .serializers import ShippingAddressSerializer
from .services import create_address, delete_address, update_address


def _as_drf_error(exc: DjangoValidationError) -> DRFValidationError:
    if hasattr(exc, "message_dict"):
        return DRFValidationError(detail=exc.message_dict)
    return DRFValidationError(detail=list(exc))


class AddressListCreateView(generics.ListCreateAPIView):
    """List and create shipping addresses for the authenticated user."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ShippingAddressSerializer
    filterset_fields = ["city", "state", "country", "address_type"]
    search_fields = ["title", "street", "city", "zip_code"]
    ordering_fields = ["updated_at", "id", "city"]
    throttle_scope = "addresses"

    def get_queryset(self):
        return list_addresses(self.request.user.id)

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="List current user's shipping addresses",
        parameters=[
            OpenApiParameter(
                name="address_type",
                location=OpenApiParameter.QUERY,
                required=False,
                type=OpenApiTypes.STR,
                description="Filter by address type (home, office, pickup)",
            ),
            OpenApiParameter(
                name="search",
                location=OpenApiParameter.QUERY,
                required=False,
                type=OpenApiTypes.STR,
                description="Search by title, street, city, or zip_code",
            ),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Create a shipping address",
        examples=[
            OpenApiExample(
                "Create address",
                value={
                    "title": "Office",
                    "address_type": "office",
                    "street": "1 Market St",
                    "city": "San Francisco",
                    "state": "CA",
                    "zip_code": "94105",
                    "country": "US",
                },
                request_only=True,
            )
        ],
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)

    def perform_create(self, serializer: ShippingAddressSerializer) -> None:
        try:
            serializer.instance = create_address(user=self.request.user, **serializer.validated_data)
        except DjangoValidationError as exc:
            raise _as_drf_error(exc)


class AddressDetailView(generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete an address owned by the authenticated user."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ShippingAddressSerializer
    throttle_scope = "addresses_write"

    def get_queryset(self):
        return list_addresses(self.request.user.id)

    @extend_schema(tags=["Customer Endpoints"], summary="Get a shipping address")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(tags=["Customer Endpoints"], summary="Update a shipping address")
    def patch(self, request, *args, **kwargs):
        return super().patch(request, *args, **kwargs)

    @extend_schema(tags=["Customer Endpoints"], summary="Replace a shipping address")
    def put(self, request, *args, **kwargs):
        return super().put(request, *args, **kwargs)

    def perform_update(self, serializer: ShippingAddressSerializer) -> None:
        try:
            serializer.instance = update_address(
                user_id=self.request.user.id,
                address_id=serializer.instance.id,
                **serializer.validated_data,
            )
        except DjangoValidationError as exc:
            raise _as_drf_error(exc)

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Delete a shipping address",
        description="Addresses referenced by an order cannot be deleted (409).",
        responses={204: None},
    )
    def delete(self, request, *args, **kwargs):
        address = self.get_object()
        try:
            delete_address(user_id=request.user.id, address_id=address.id)
        except DomainError as exc:
            return api_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
