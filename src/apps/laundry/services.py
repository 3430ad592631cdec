"""
Order and complaint business logic.
"""
import logging
from datetime import date
from decimal import Decimal

from django.utils import timezone

from apps.core.models import User
from apps.core.permissions import is_admin

from .constants import DEFAULT_UNIT_PRICE, UNIT_PRICES
from .exceptions import OrderNotFound
from .models import Complaint, Order

logger = logging.getLogger(__name__)


class OrderService:
    """Service for placing and tracking orders."""

    @staticmethod
    def unit_price(clothing_type: str) -> Decimal:
        return UNIT_PRICES.get(clothing_type, DEFAULT_UNIT_PRICE)

    @classmethod
    def calculate_total(cls, clothing_type: str, quantity: int) -> Decimal:
        return cls.unit_price(clothing_type) * quantity

    @classmethod
    def create_order(
        cls,
        user: User,
        clothing_type: str,
        quantity: int,
        pickup_date: date
    ) -> Order:
        """Place an order priced from the clothing type."""
        order = Order.objects.create(
            user=user,
            user_name=user.name,
            clothing_type=clothing_type,
            quantity=quantity,
            pickup_date=pickup_date,
            total_amount=cls.calculate_total(clothing_type, quantity),
        )
        logger.info(f"Order {order.id} created by user {user.id}: {clothing_type} x{quantity}")
        return order

    @staticmethod
    def update_status(order: Order, status: str) -> Order:
        """Set the order status; moving to Delivered stamps the delivery date."""
        order.status = status
        update_fields = ['status', 'updated_at']

        if status == Order.Status.DELIVERED:
            order.delivery_date = timezone.now()
            update_fields.append('delivery_date')

        order.save(update_fields=update_fields)
        logger.info(f"Order {order.id} status set to {status}")
        return order


class ComplaintService:
    """Service for filing and resolving complaints."""

    @staticmethod
    def create_complaint(user: User, order_id, issue: str, description: str) -> Complaint:
        """
        File a complaint against an order.

        Non-admins can only complain about their own orders; any other
        order is reported as not found.
        """
        orders = Order.objects.all()
        if not is_admin(user):
            orders = orders.filter(user=user)

        order = orders.filter(id=order_id).first()
        if order is None:
            raise OrderNotFound()

        complaint = Complaint.objects.create(
            user=user,
            user_name=user.name,
            order=order,
            issue=issue,
            description=description,
        )
        logger.info(f"Complaint {complaint.id} filed by user {user.id} on order {order.id}")
        return complaint

    @staticmethod
    def update_status(complaint: Complaint, status: str) -> Complaint:
        complaint.status = status
        complaint.save(update_fields=['status', 'updated_at'])
        logger.info(f"Complaint {complaint.id} status set to {status}")
        return complaint
