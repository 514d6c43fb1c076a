"""
Email notification service.
Renders plain-text booking emails and sends them through Django's mail backend.
"""
import logging
from typing import Any, Dict

from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

from apps.notifications.models import NotificationType

logger = logging.getLogger(__name__)


class EmailNotificationService:
    """
    Service class for sending booking emails.
    """

    TEMPLATE_MAP = {
        NotificationType.BOOKING_CONFIRMATION: 'notifications/emails/booking_confirmation.txt',
        NotificationType.NEW_BOOKING: 'notifications/emails/new_booking.txt',
    }

    SUBJECT_MAP = {
        NotificationType.BOOKING_CONFIRMATION: 'Your booking is confirmed - {date} {time}',
        NotificationType.NEW_BOOKING: 'New booking - {customer_name} on {date} {time}',
    }

    @classmethod
    def send_email(
        cls,
        recipient_email: str,
        recipient_name: str,
        notification_type: str,
        context: Dict[str, Any],
    ) -> bool:
        """
        Send an email notification.

        Args:
            recipient_email: Recipient's email address
            recipient_name: Recipient's name
            notification_type: Type of notification (from NotificationType)
            context: Template context dictionary

        Returns:
            True if the message was handed to the mail backend, False if skipped

        Raises:
            Whatever the mail backend raises; the caller decides about retries.
        """
        if not recipient_email:
            logger.warning(f"Skipping notification {notification_type}: no recipient email")
            return False

        template_name = cls.TEMPLATE_MAP.get(notification_type)
        if not template_name:
            logger.error(f"No template found for notification type: {notification_type}")
            return False

        subject = cls.SUBJECT_MAP[notification_type].format(
            date=context.get('date', ''),
            time=context.get('time', ''),
            customer_name=context.get('customer_name', ''),
        )
        body = render_to_string(template_name, {**context, 'recipient_name': recipient_name})

        send_mail(
            subject=subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            fail_silently=False,
        )
        logger.info(f"Email sent successfully: {notification_type} to {recipient_email}")
        return True
