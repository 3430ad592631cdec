"""
Laundry Service Exceptions.
"""
from common.exceptions import NotFoundException


class OrderNotFound(NotFoundException):
    """Raised when an order does not exist or is not visible to the caller."""
    default_detail = "Order not found."
    default_code = "order_not_found"
    error_code = "order_not_found"
