"""
Laundry Service Serializers.

Field names follow the camelCase keys of the public API.
"""
from rest_framework import serializers

from .constants import MAX_QUANTITY
from .models import Complaint, Order


class OrderSerializer(serializers.ModelSerializer):
    """Serializer for reading orders."""

    userId = serializers.UUIDField(source='user_id', read_only=True)
    userName = serializers.CharField(source='user_name', read_only=True)
    clothingType = serializers.CharField(source='clothing_type', read_only=True)
    pickupDate = serializers.DateField(source='pickup_date', read_only=True)
    deliveryDate = serializers.DateTimeField(source='delivery_date', read_only=True)
    totalAmount = serializers.DecimalField(
        source='total_amount', max_digits=10, decimal_places=2, read_only=True
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'userId', 'userName', 'clothingType', 'quantity',
            'pickupDate', 'deliveryDate', 'status', 'totalAmount', 'createdAt',
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """Serializer for placing orders."""

    clothingType = serializers.CharField(max_length=50)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    pickupDate = serializers.DateField()


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class ComplaintSerializer(serializers.ModelSerializer):
    """Serializer for reading complaints."""

    userId = serializers.UUIDField(source='user_id', read_only=True)
    userName = serializers.CharField(source='user_name', read_only=True)
    orderId = serializers.UUIDField(source='order_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Complaint
        fields = [
            'id', 'userId', 'userName', 'orderId', 'issue',
            'description', 'status', 'createdAt',
        ]
        read_only_fields = fields


class ComplaintCreateSerializer(serializers.Serializer):
    """Serializer for filing complaints."""

    orderId = serializers.UUIDField()
    issue = serializers.CharField(max_length=255)
    description = serializers.CharField()


class ComplaintStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Complaint.Status.choices)
