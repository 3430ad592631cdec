# apps/laundry/apps.py
from django.apps import AppConfig


class LaundryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.laundry'
    label = 'laundry'
    verbose_name = 'Orders and Complaints'
