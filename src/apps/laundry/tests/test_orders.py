# apps/laundry/tests/test_orders.py
"""
Tests for order pricing and the order endpoints
"""

from decimal import Decimal

import pytest
from rest_framework import status

from apps.laundry.models import Order
from apps.laundry.services import OrderService


pytestmark = pytest.mark.django_db


class TestPricing:

    @pytest.mark.parametrize('clothing_type, quantity, expected', [
        ('Regular Wash', 4, Decimal('10.00')),
        ('Dry Clean', 2, Decimal('17.98')),
        ('Delicate', 1, Decimal('4.50')),
        ('Heavy Duty', 3, Decimal('10.50')),
    ])
    def test_calculate_total(self, clothing_type, quantity, expected):
        assert OrderService.calculate_total(clothing_type, quantity) == expected

    def test_unknown_type_priced_as_regular_wash(self):
        assert OrderService.unit_price('Leather') == Decimal('2.50')


class TestOrderEndpoints:

    def test_create_order(self, customer_client, customer):
        response = customer_client.post('/api/orders', {
            'clothingType': 'Dry Clean',
            'quantity': 3,
            'pickupDate': '2026-11-02',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['totalAmount'] == '26.97'
        assert response.data['status'] == 'Pending'
        assert response.data['userName'] == 'A'
        assert response.data['deliveryDate'] is None
        assert Order.objects.get(id=response.data['id']).user == customer

    @pytest.mark.parametrize('quantity', [0, 1001])
    def test_create_rejects_quantity(self, customer_client, quantity):
        response = customer_client.post('/api/orders', {
            'clothingType': 'Delicate',
            'quantity': quantity,
            'pickupDate': '2026-11-02',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'validation_error'

    def test_unauthenticated(self, api_client):
        response = api_client.get('/api/orders')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_customer_sees_own_orders(self, customer_client, customer, other_customer, make_order):
        own = make_order(customer)
        make_order(other_customer)

        response = customer_client.get('/api/orders')

        assert [o['id'] for o in response.data] == [str(own.id)]

    def test_admin_sees_all_orders(self, admin_client, customer, other_customer, make_order):
        make_order(customer)
        make_order(other_customer)

        response = admin_client.get('/api/orders')

        assert len(response.data) == 2

    def test_user_orders_route(self, admin_client, admin, customer, make_order):
        make_order(customer)
        own = make_order(admin)

        response = admin_client.get('/api/orders/user')

        assert response.status_code == status.HTTP_200_OK
        assert [o['id'] for o in response.data] == [str(own.id)]

    def test_other_customers_order_hidden(self, customer_client, other_customer, make_order):
        order = make_order(other_customer)

        response = customer_client.get(f'/api/orders/{order.id}')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['success'] is False
        assert response.data['error']['code'] == 'not_found'

    def test_customer_cannot_update_status(self, customer_client, customer, make_order):
        order = make_order(customer)

        response = customer_client.patch(f'/api/orders/{order.id}', {'status': 'Delivered'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        order.refresh_from_db()
        assert order.status == Order.Status.PENDING

    def test_admin_updates_status(self, admin_client, customer, make_order):
        order = make_order(customer)

        response = admin_client.patch(f'/api/orders/{order.id}', {'status': 'Washed'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'Washed'
        assert response.data['deliveryDate'] is None

    def test_delivered_stamps_delivery_date(self, admin_client, customer, make_order):
        order = make_order(customer)

        response = admin_client.patch(f'/api/orders/{order.id}', {'status': 'Delivered'}, format='json')

        assert response.data['deliveryDate'] is not None
        order.refresh_from_db()
        assert order.delivery_date is not None

    def test_unknown_status_rejected(self, admin_client, customer, make_order):
        order = make_order(customer)

        response = admin_client.patch(f'/api/orders/{order.id}', {'status': 'Lost'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admin_deletes_order(self, admin_client, customer, make_order):
        order = make_order(customer)

        response = admin_client.delete(f'/api/orders/{order.id}')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Order.objects.exists()

    def test_customer_cannot_delete(self, customer_client, customer, make_order):
        order = make_order(customer)

        response = customer_client.delete(f'/api/orders/{order.id}')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Order.objects.exists()
