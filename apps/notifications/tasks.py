"""
Celery tasks for email notifications.
"""
import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_booking_email_task(
    self,
    notification_type: str,
    recipient_email: str,
    recipient_name: str,
    context: dict,
):
    """
    Async task to send a single booking email.

    Args:
        notification_type: Type of notification (from NotificationType)
        recipient_email: Recipient's email address
        recipient_name: Recipient's name
        context: Template context dictionary (JSON-serializable)
    """
    from apps.notifications.services.email_service import EmailNotificationService

    try:
        EmailNotificationService.send_email(
            recipient_email=recipient_email,
            recipient_name=recipient_name,
            notification_type=notification_type,
            context=context,
        )
        logger.info(f"Email task completed: {notification_type} to {recipient_email}")

    except Exception as e:
        logger.error(f"Email task failed: {notification_type} to {recipient_email}: {e}")
        raise self.retry(exc=e)
