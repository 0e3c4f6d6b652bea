"""DRF views for cart operations."""

from common.exceptions import DomainError, api_error_response
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import CartItem
from .selectors import get_cart_for_user
from .serializers import AddItemSerializer, CartReadSerializer, UpdateItemQuantitySerializer
from .services import clear_cart, remove_item

ErrorSerializer = inline_serializer(
    name="CartError",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
)


class CartDetailView(APIView):
    """Return the authenticated user's cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the authenticated user's cart with items priced at current variant prices.",
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "id": 1,
                    "items": [
                        {
                            "id": 10,
                            "variant_id": 100,
                            "sku": "SMS-BLK",
                            "product_title": "Studio Monitor Speakers",
                            "quantity": 2,
                            "unit_price": "299.99",
                            "line_total": "599.98",
                        }
                    ],
                    "item_count": 2,
                    "unpriced_items": 0,
                    "subtotal": "599.98",
                    "total": "599.98",
                    "checkout_ready": True,
                },
            )
        ],
    )
    def get(self, request):
        cart = get_cart_for_user(user=request.user)
        data = CartReadSerializer.from_cart(cart=cart).data
        return Response(data, status=status.HTTP_200_OK)


class CartAddItemView(APIView):
    """Add an item to the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description="Adds a product variant to the user's cart; an existing line has its quantity increased.",
        request=AddItemSerializer,
        responses={
            201: inline_serializer(
                name="CartItemCreatedResponse",
                fields={"id": rf_serializers.IntegerField(), "quantity": rf_serializers.IntegerField()},
            ),
            400: ErrorSerializer,
            404: ErrorSerializer,
        },
        examples=[OpenApiExample("Added", value={"id": 10, "quantity": 2})],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        try:
            item = serializer.save()
        except DomainError as exc:
            return api_error_response(exc)
        return Response({"id": item.id, "quantity": item.quantity}, status=status.HTTP_201_CREATED)


class CartItemUpdateView(APIView):
    """Update a cart item's quantity."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        request=UpdateItemQuantitySerializer,
        responses={
            200: inline_serializer(
                name="CartItemUpdatedResponse",
                fields={"id": rf_serializers.IntegerField(), "quantity": rf_serializers.IntegerField()},
            ),
            400: ErrorSerializer,
            404: ErrorSerializer,
        },
        examples=[OpenApiExample("Updated", value={"id": 10, "quantity": 3})],
    )
    def patch(self, request, item_id: int):
        try:
            item = CartItem.objects.get(id=item_id, cart__user_id=request.user.id)
        except CartItem.DoesNotExist:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        serializer = UpdateItemQuantitySerializer(instance=item, data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        try:
            item = serializer.save()
        except DomainError as exc:
            return api_error_response(exc)
        return Response({"id": item.id, "quantity": item.quantity}, status=status.HTTP_200_OK)


class CartItemDeleteView(APIView):
    """Remove an item from the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Delete cart item",
        responses={204: None, 404: ErrorSerializer},
    )
    def delete(self, request, item_id: int):
        try:
            remove_item(user=request.user, item_id=item_id)
        except DomainError as exc:
            return api_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartClearView(APIView):
    """Clear the cart: delete every item, keep the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        responses={
            200: inline_serializer(
                name="CartCleared",
                fields={"status": rf_serializers.CharField(), "removed": rf_serializers.IntegerField()},
            ),
        },
        examples=[OpenApiExample("Cleared", value={"status": "cleared", "removed": 2})],
    )
    def post(self, request):
        removed = clear_cart(user=request.user)
        return Response({"status": "cleared", "removed": removed}, status=status.HTTP_200_OK)
