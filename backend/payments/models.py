from django.db import models


class Payment(models.Model):
    """
    Append-only ledger row for a settled charge.

    ``reference`` is the provider's settlement identifier and the idempotency
    key: the unique constraint guarantees at most one row per reference no
    matter how many times the provider or a client reports the same charge.
    """

    SUCCESS = "SUCCESS"
    STATUSES = [
        (SUCCESS, "Success"),
    ]

    reference = models.CharField(max_length=120, unique=True)
    booking = models.ForeignKey("bookings.Booking", on_delete=models.PROTECT, related_name="payments")
    amount = models.PositiveBigIntegerField(help_text="Minor units (kobo/cents).")
    currency = models.CharField(max_length=3)
    status = models.CharField(max_length=12, choices=STATUSES, default=SUCCESS)
    raw = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.reference} {self.amount} {self.currency}"
