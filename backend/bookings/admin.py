from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "property", "guest", "start_date", "end_date", "status", "payment_status", "created_at")
    list_filter = ("status", "payment_status")
    search_fields = ("property__title", "guest__email", "payment_ref")
    readonly_fields = ("payment_ref", "amount", "currency", "payment_status", "created_at")
