"""Laundry Service URLs."""
from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import ComplaintViewSet, OrderViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'orders', OrderViewSet, basename='order')
router.register(r'complaints', ComplaintViewSet, basename='complaint')

urlpatterns = [
    path('', include(router.urls)),
]
