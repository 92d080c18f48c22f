# billing/models.py

import uuid
from django.db import models
from django.conf import settings
from django.utils import timezone


# =========================
# ORDER
# =========================

class Order(models.Model):
    """A single program purchase. payment_key is the gateway's payment id."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["buyer", "created_at"]),
            models.Index(fields=["coach", "status"]),
            models.Index(fields=["program", "status"]),
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    program = models.ForeignKey(
        "programs.Program",
        on_delete=models.CASCADE,
        related_name="orders",
    )
    coach = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="coach_orders",
    )

    amount = models.DecimalField(max_digits=12, decimal_places=0)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_key = models.CharField(max_length=200, unique=True, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order {self.id} - {self.buyer} - {self.program.title} ({self.status})"

    @property
    def is_completed(self):
        return self.status == self.Status.COMPLETED


# =========================
# ENROLLMENT
# =========================

class Enrollment(models.Model):
    """
    Access grant to a program.

    end_date = None means lifetime access.
    """

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "Active"
        EXPIRED = "EXPIRED", "Expired"
        PAUSED = "PAUSED", "Paused"

    class Meta:
        db_table = "enrollments"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"]),
            models.Index(fields=["program", "status"]),
            models.Index(fields=["status", "end_date"]),
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="enrollments",
    )
    program = models.ForeignKey(
        "programs.Program",
        on_delete=models.CASCADE,
        related_name="enrollments",
    )
    order = models.ForeignKey(
        Order,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name="enrollments",
    )

    start_date = models.DateTimeField(default=timezone.now, null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} -> {self.program.title} ({self.status})"

    @property
    def is_expired(self):
        return self.end_date is not None and self.end_date <= timezone.now()

    @property
    def has_access(self):
        """ACTIVE and not past end_date."""
        return self.status == self.Status.ACTIVE and not self.is_expired
