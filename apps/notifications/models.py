"""
Notification models.
In-app notifications shown in the user's notification center.
"""
from django.db import models
from apps.core.models import BaseModel


class NotificationType(models.TextChoices):
    """Types of notifications"""
    BOOKING_CONFIRMATION = 'booking_confirmation', 'Booking Confirmation'
    BOOKING_CANCELLATION = 'booking_cancellation', 'Booking Cancellation'
    NEW_BOOKING = 'new_booking', 'New Booking (for barber)'
    SYSTEM = 'system', 'System Notification'


class Notification(BaseModel):
    """
    In-app notification model for user notifications.
    These are displayed in the app's notification center.
    """
    user = models.ForeignKey(
        'authentication.User',
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    title = models.CharField(max_length=255)
    message = models.TextField()

    # Type
    notification_type = models.CharField(
        max_length=50,
        choices=NotificationType.choices,
        default=NotificationType.SYSTEM
    )

    # Status
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    # Related objects (optional)
    related_object_type = models.CharField(max_length=50, blank=True)
    related_object_id = models.UUIDField(null=True, blank=True)

    # Metadata
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = 'notifications'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notifications_user_read_idx'),
            models.Index(fields=['notification_type'], name='notifications_type_idx'),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.title}"
