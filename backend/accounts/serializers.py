from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Expose the public fields for the custom user model."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "display_name",
            "role",
        ]
        read_only_fields = ["id", "email", "role"]


class OtpRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value):
        return value.strip().lower()


class OtpVerifySerializer(OtpRequestSerializer):
    otp = serializers.RegexField(r"^\d{6}$", error_messages={"invalid": "OTP must be 6 digits."})


def issue_tokens_for_user(user) -> dict:
    """Return a JWT pair whose access token also carries the email and role claims."""
    refresh = RefreshToken.for_user(user)
    refresh["email"] = user.email
    refresh["role"] = user.role
    access = refresh.access_token
    return {
        "access": str(access),
        "refresh": str(refresh),
    }
