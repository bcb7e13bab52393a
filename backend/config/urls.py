from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import MeView, OtpSendView, OtpVerifyView
from bookings.api import (
    BookingApproveView,
    BookingCancelView,
    BookingCreateView,
    BookingRejectView,
    HostBookingsView,
    MyBookingsView,
)
from payments.api import (
    BookingPaymentsView,
    MyPaymentsView,
    PaymentInitView,
    PaymentVerifyView,
    PaystackWebhookView,
)
from properties.api import PropertyViewSet

router = DefaultRouter()
router.register(r"properties", PropertyViewSet, basename="property")

urlpatterns = [
    path("admin/", admin.site.urls),
    path(
        "api/payments/webhook/paystack/",
        PaystackWebhookView.as_view(),
        name="paystack-webhook",
    ),
    path("api/auth/otp/send/", OtpSendView.as_view(), name="auth-otp-send"),
    path("api/auth/otp/verify/", OtpVerifyView.as_view(), name="auth-otp-verify"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),
    path("api/bookings/", BookingCreateView.as_view(), name="booking-create"),
    path("api/bookings/me/", MyBookingsView.as_view(), name="booking-mine"),
    path("api/bookings/host/", HostBookingsView.as_view(), name="booking-host"),
    path(
        "api/bookings/<uuid:booking_id>/approve/",
        BookingApproveView.as_view(),
        name="booking-approve",
    ),
    path(
        "api/bookings/<uuid:booking_id>/reject/",
        BookingRejectView.as_view(),
        name="booking-reject",
    ),
    path(
        "api/bookings/<uuid:booking_id>/cancel/",
        BookingCancelView.as_view(),
        name="booking-cancel",
    ),
    path("api/payments/init/", PaymentInitView.as_view(), name="payment-init"),
    path(
        "api/payments/verify/<str:reference>/",
        PaymentVerifyView.as_view(),
        name="payment-verify",
    ),
    path("api/payments/me/", MyPaymentsView.as_view(), name="payment-mine"),
    path(
        "api/payments/by-booking/<uuid:booking_id>/",
        BookingPaymentsView.as_view(),
        name="payment-by-booking",
    ),
    path("api/", include(router.urls)),
]
