# apps/laundry/tests/test_complaints.py
"""
Tests for filing and resolving complaints
"""

import pytest
from rest_framework import status

from apps.laundry.exceptions import OrderNotFound
from apps.laundry.models import Complaint
from apps.laundry.services import ComplaintService


pytestmark = pytest.mark.django_db


class TestComplaintService:

    def test_complaint_on_own_order(self, customer, make_order):
        order = make_order(customer)

        complaint = ComplaintService.create_complaint(customer, order.id, 'Stain', 'Shirt came back stained')

        assert complaint.order == order
        assert complaint.user_name == 'A'
        assert complaint.status == Complaint.Status.OPEN

    def test_complaint_on_other_customers_order(self, customer, other_customer, make_order):
        order = make_order(other_customer)

        with pytest.raises(OrderNotFound):
            ComplaintService.create_complaint(customer, order.id, 'Stain', 'Not mine')

        assert not Complaint.objects.exists()

    def test_admin_may_file_on_any_order(self, admin, customer, make_order):
        order = make_order(customer)

        complaint = ComplaintService.create_complaint(admin, order.id, 'Damage', 'Reported by phone')

        assert complaint.user == admin


class TestComplaintEndpoints:

    def test_file_complaint(self, customer_client, customer, make_order):
        order = make_order(customer)

        response = customer_client.post('/api/complaints', {
            'orderId': str(order.id),
            'issue': 'Missing item',
            'description': 'One sock is missing',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['orderId'] == str(order.id)
        assert response.data['status'] == 'Open'

    def test_file_on_other_customers_order(self, customer_client, other_customer, make_order):
        order = make_order(other_customer)

        response = customer_client.post('/api/complaints', {
            'orderId': str(order.id),
            'issue': 'Missing item',
            'description': 'One sock is missing',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error']['code'] == 'order_not_found'

    def test_lists_are_scoped(self, customer_client, admin_client, customer, other_customer, make_order):
        ComplaintService.create_complaint(customer, make_order(customer).id, 'Late', 'Two days late')
        ComplaintService.create_complaint(other_customer, make_order(other_customer).id, 'Late', 'A week late')

        assert len(customer_client.get('/api/complaints').data) == 1
        assert len(customer_client.get('/api/complaints/user').data) == 1
        assert len(admin_client.get('/api/complaints').data) == 2

    def test_admin_updates_status(self, admin_client, customer, make_order):
        complaint = ComplaintService.create_complaint(customer, make_order(customer).id, 'Late', 'Two days late')

        response = admin_client.patch(f'/api/complaints/{complaint.id}', {'status': 'In Progress'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        complaint.refresh_from_db()
        assert complaint.status == Complaint.Status.IN_PROGRESS

    def test_customer_cannot_update_status(self, customer_client, customer, make_order):
        complaint = ComplaintService.create_complaint(customer, make_order(customer).id, 'Late', 'Two days late')

        response = customer_client.patch(f'/api/complaints/{complaint.id}', {'status': 'Resolved'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_complaints_cannot_be_deleted(self, admin_client, customer, make_order):
        complaint = ComplaintService.create_complaint(customer, make_order(customer).id, 'Late', 'Two days late')

        response = admin_client.delete(f'/api/complaints/{complaint.id}')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
