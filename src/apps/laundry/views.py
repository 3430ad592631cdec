"""Laundry Service Views."""
import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.permissions import IsAdminRole, is_admin

from .models import Complaint, Order
from .serializers import (
    ComplaintCreateSerializer, ComplaintSerializer, ComplaintStatusSerializer,
    OrderCreateSerializer, OrderSerializer, OrderStatusSerializer,
)
from .services import ComplaintService, OrderService

logger = logging.getLogger(__name__)


class OrderViewSet(viewsets.ModelViewSet):
    """
    Endpoints:
    - GET /orders - All orders (admin) or own orders, newest first
    - POST /orders - Place an order
    - GET /orders/user - Own orders
    - GET /orders/{id} - Order detail
    - PATCH /orders/{id} - Update status (admin)
    - DELETE /orders/{id} - Delete order (admin)
    """

    queryset = Order.objects.select_related('user')
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['status', 'clothing_type']
    ordering = ['-created_at']
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_permissions(self):
        if self.action in ['partial_update', 'destroy']:
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if is_admin(self.request.user):
            return queryset
        return queryset.filter(user=self.request.user)

    def create(self, request, *args, **kwargs):
        """Place an order for the caller."""
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderService.create_order(
            user=request.user,
            clothing_type=data['clothingType'],
            quantity=data['quantity'],
            pickup_date=data['pickupDate'],
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        """Update order status."""
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_status(order, serializer.validated_data['status'])
        return Response(OrderSerializer(order).data)

    def perform_destroy(self, instance):
        logger.info(f"Order {instance.id} deleted by user {self.request.user.id}")
        instance.delete()

    @action(detail=False, methods=['get'])
    def user(self, request):
        """Get current user's orders."""
        orders = Order.objects.filter(user=request.user).order_by('-created_at')
        return Response(OrderSerializer(orders, many=True).data)


class ComplaintViewSet(viewsets.ModelViewSet):
    """
    Endpoints:
    - GET /complaints - All complaints (admin) or own complaints
    - POST /complaints - File a complaint about an order
    - GET /complaints/user - Own complaints
    - GET /complaints/{id} - Complaint detail
    - PATCH /complaints/{id} - Update status (admin)
    """

    queryset = Complaint.objects.select_related('user', 'order')
    serializer_class = ComplaintSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['status', 'order']
    ordering = ['-created_at']
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    def get_permissions(self):
        if self.action == 'partial_update':
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if is_admin(self.request.user):
            return queryset
        return queryset.filter(user=self.request.user)

    def create(self, request, *args, **kwargs):
        """File a complaint for the caller."""
        serializer = ComplaintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        complaint = ComplaintService.create_complaint(
            user=request.user,
            order_id=data['orderId'],
            issue=data['issue'],
            description=data['description'],
        )
        return Response(ComplaintSerializer(complaint).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        """Update complaint status."""
        complaint = self.get_object()
        serializer = ComplaintStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        complaint = ComplaintService.update_status(complaint, serializer.validated_data['status'])
        return Response(ComplaintSerializer(complaint).data)

    @action(detail=False, methods=['get'])
    def user(self, request):
        """Get current user's complaints."""
        complaints = Complaint.objects.filter(user=request.user).order_by('-created_at')
        return Response(ComplaintSerializer(complaints, many=True).data)
