from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("title", "city", "host", "nightly_price", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "city", "host__email")
