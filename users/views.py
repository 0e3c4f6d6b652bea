"""Authentication endpoints.

Bearer tokens come from simplejwt; the storefront has no registration flow
of its own and uses Django's default user model.
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .logging import log_auth_event
from .serializers import UserMeSerializer


@extend_schema(
    operation_id="users_current_user",
    summary="Get current user profile",
    description="Returns the authenticated user. Errors: 401 if credentials are missing or invalid.",
    tags=["User Endpoints"],
    responses={
        200: OpenApiResponse(description="User profile", response=UserMeSerializer),
        401: OpenApiResponse(description="Unauthorized"),
    },
)
@api_view(["GET"])
@permission_classes([IsAuthenticated])
@throttle_classes([ScopedRateThrottle])
def current_user(request):
    log_auth_event("profile", request, user=request.user)
    return Response(UserMeSerializer(request.user).data)


current_user.throttle_scope = "profile"


class SignInView(TokenObtainPairView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signin"

    @extend_schema(tags=["User Endpoints"], summary="Obtain a JWT access/refresh pair")
    def post(self, request, *args, **kwargs):
        try:
            resp = super().post(request, *args, **kwargs)
        except AuthenticationFailed:
            log_auth_event("signin", request, status="failed", extra={"username": request.data.get("username")})
            raise
        log_auth_event("signin", request, status="success", extra={"username": request.data.get("username")})
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["User Endpoints"], summary="Refresh a JWT access token")
    def post(self, request, *args, **kwargs):
        try:
            resp = super().post(request, *args, **kwargs)
        except AuthenticationFailed:
            log_auth_event("token_refresh", request, status="failed")
            raise
        log_auth_event("token_refresh", request, status="success")
        return resp
