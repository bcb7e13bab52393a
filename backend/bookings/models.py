import builtins
import uuid

from django.conf import settings
from django.db import models


class Booking(models.Model):
    """
    A guest's reservation of a property for a date range.

    ``status`` tracks the host-facing lifecycle; ``payment_status`` tracks the
    charge independently. The only link between them is that a successful
    settlement forces ``status`` to APPROVED.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    STATUSES = [
        (PENDING, "Pending"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
        (CANCELLED, "Cancelled"),
    ]

    PAYMENT_NONE = "NONE"
    PAYMENT_INITIATED = "INITIATED"
    PAYMENT_SUCCESS = "SUCCESS"
    PAYMENT_FAILED = "FAILED"
    PAYMENT_STATUSES = [
        (PAYMENT_NONE, "None"),
        (PAYMENT_INITIATED, "Initiated"),
        (PAYMENT_SUCCESS, "Success"),
        (PAYMENT_FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    payment_ref = models.CharField(max_length=120, unique=True, null=True, blank=True)
    amount = models.PositiveBigIntegerField(null=True, blank=True, help_text="Minor units (kobo/cents).")
    currency = models.CharField(max_length=3, blank=True)
    payment_status = models.CharField(max_length=12, choices=PAYMENT_STATUSES, default=PAYMENT_NONE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_end_after_start",
            ),
        ]

    def __str__(self):
        return f"{self.property.title} {self.start_date:%Y-%m-%d} to {self.end_date:%Y-%m-%d} ({self.status})"

    @builtins.property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    @builtins.property
    def is_pending(self) -> bool:
        return self.status == self.PENDING
