"""Read-only discount endpoints."""

from common.exceptions import DomainError, api_error_response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import DiscountPreviewQuerySerializer, DiscountPreviewSerializer
from .services import preview_discount


class DiscountPreviewView(APIView):
    """Preview a discount code against the authenticated user's cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "discounts"

    @extend_schema(
        tags=["Discount Endpoints"],
        summary="Preview discount code",
        description=(
            "Computes what the code would take off the current cart at live prices. "
            "Nothing is persisted. Inactive or expired codes report `applicable: false`."
        ),
        parameters=[
            OpenApiParameter(
                name="code",
                location=OpenApiParameter.QUERY,
                required=True,
                type=OpenApiTypes.STR,
                description="Discount code, matched exactly",
            )
        ],
        responses={200: DiscountPreviewSerializer},
        examples=[
            OpenApiExample(
                "SAVE10",
                value={"code": "SAVE10", "applicable": True, "subtotal": "35.00", "discount": "10.00", "total": "25.00"},
                response_only=True,
            )
        ],
    )
    def get(self, request):
        query = DiscountPreviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            preview = preview_discount(user=request.user, code=query.validated_data["code"])
        except DomainError as exc:
            return api_error_response(exc)
        return Response(DiscountPreviewSerializer(preview).data, status=status.HTTP_200_OK)
