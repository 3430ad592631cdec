# apps/core/services/notifier.py
"""
Notifier - outbound account emails through Django's mail framework.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

from apps.core.exceptions import NotificationDeliveryError
from apps.core.models import User

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Reset your LaundryPro password"

RESET_BODY = """Hello {name},

We received a request to reset the password for your LaundryPro account.
Open the link below within {minutes} minutes to choose a new password:

{reset_url}

If you did not ask for this, you can ignore this email.
"""


class ResetNotifier:
    """Sends password-reset links."""

    def send_reset_link(self, user: User, reset_url: str) -> None:
        """
        Email the reset link to the user.

        Raises:
            NotificationDeliveryError: If the mail backend rejects the message
        """
        lifetime = settings.JWT_SETTINGS['RESET_TOKEN_LIFETIME']
        body = RESET_BODY.format(
            name=user.name,
            minutes=int(lifetime.total_seconds() // 60),
            reset_url=reset_url,
        )

        try:
            send_mail(
                subject=RESET_SUBJECT,
                message=body,
                from_email=getattr(settings, 'DEFAULT_FROM_EMAIL', 'noreply@example.com'),
                recipient_list=[user.email],
                fail_silently=False,
            )
        except Exception as e:
            raise NotificationDeliveryError(f"Reset email delivery failed: {e}") from e

        logger.info(f"Password reset email sent to user {user.id}")
