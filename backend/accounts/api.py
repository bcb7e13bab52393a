import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from .serializers import (
    OtpRequestSerializer,
    OtpVerifySerializer,
    UserSerializer,
    issue_tokens_for_user,
)
from .services.otp import OtpError, consume_code, issue_code, send_code

logger = logging.getLogger(__name__)

User = get_user_model()


class OtpSendView(APIView):
    """Email a one-time login code to the given address."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "otp"

    def post(self, request, *args, **kwargs):
        serializer = OtpRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        code = issue_code(email)
        try:
            send_code(email, code)
        except Exception as exc:
            logger.warning("OTP email to %s failed: %s", email, exc)
            if settings.DEBUG:
                return Response({"detail": "OTP issued (dev mode).", "dev_otp": code})
            return Response(
                {"detail": "Failed to send OTP."},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response({"detail": "OTP sent."})


class OtpVerifyView(APIView):
    """Exchange a valid one-time code for a JWT pair, creating the user on first login."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "otp"

    def post(self, request, *args, **kwargs):
        serializer = OtpVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        try:
            consume_code(email, serializer.validated_data["otp"])
        except OtpError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "role": User.USER},
        )
        if created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
            logger.info("Created user %s on first OTP login", email)

        payload = {"user": UserSerializer(user).data}
        payload.update(issue_tokens_for_user(user))
        return Response(payload)


class MeView(APIView):
    """Return the serialized profile for the current authenticated user."""

    def get(self, request, *args, **kwargs):
        return Response(UserSerializer(request.user).data)

    def patch(self, request, *args, **kwargs):
        serializer = UserSerializer(instance=request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data)
