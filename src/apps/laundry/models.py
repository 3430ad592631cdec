"""
Laundry Service Models.
"""
import uuid

from django.conf import settings
from django.db import models


class Order(models.Model):
    """A laundry order placed by a user."""

    class Status(models.TextChoices):
        PENDING = 'Pending', 'Pending'
        PICKED = 'Picked', 'Picked'
        WASHED = 'Washed', 'Washed'
        DELIVERED = 'Delivered', 'Delivered'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='orders'
    )
    # Name at the time of ordering
    user_name = models.CharField(max_length=255)

    clothing_type = models.CharField(max_length=50)
    quantity = models.PositiveIntegerField()
    pickup_date = models.DateField()
    delivery_date = models.DateTimeField(null=True, blank=True)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'created_at']),
            models.Index(fields=['status']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name='order_quantity_positive'
            ),
        ]

    def __str__(self):
        return f"Order {self.id} - {self.clothing_type} x{self.quantity} ({self.status})"


class Complaint(models.Model):
    """A complaint filed by a user about one of their orders."""

    class Status(models.TextChoices):
        OPEN = 'Open', 'Open'
        IN_PROGRESS = 'In Progress', 'In Progress'
        RESOLVED = 'Resolved', 'Resolved'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='complaints'
    )
    user_name = models.CharField(max_length=255)
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='complaints'
    )

    issue = models.CharField(max_length=255)
    description = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.OPEN
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'complaints'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user']),
            models.Index(fields=['order']),
        ]

    def __str__(self):
        return f"Complaint {self.id} on order {self.order_id} ({self.status})"
