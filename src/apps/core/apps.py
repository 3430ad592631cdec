# apps/core/apps.py
from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    label = 'core'
    verbose_name = 'Users and Authentication'

    def ready(self):
        from apps.core.authentication import check_signing_key

        check_signing_key()
