"""
Booking notification dispatcher.

Fans a freshly created booking out to every channel independently:
1. in_app: a Notification row for the barber
2. customer_email: confirmation email to the customer (Celery)
3. barber_email: new-booking email to the barber (Celery)

A failing channel never stops the others and never raises to the caller.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional
from uuid import UUID

from django.conf import settings
from django.utils import timezone

from apps.notifications.models import Notification, NotificationType
from apps.notifications.tasks import send_booking_email_task

logger = logging.getLogger(__name__)

CHANNEL_IN_APP = 'in_app'
CHANNEL_CUSTOMER_EMAIL = 'customer_email'
CHANNEL_BARBER_EMAIL = 'barber_email'


@dataclass
class BookingNotificationDetails:
    """Everything the channels need, captured once the booking is committed."""
    booking_id: UUID
    customer_id: UUID
    customer_name: str
    customer_email: str
    barber_id: UUID
    barber_user_id: UUID
    barber_name: str
    barber_email: str
    date: date
    time: str
    services: List[dict] = field(default_factory=list)
    total_amount: Decimal = Decimal('0')

    @classmethod
    def from_booking(cls, booking) -> 'BookingNotificationDetails':
        start = timezone.localtime(booking.start_datetime)
        barber_user = booking.barber.user
        return cls(
            booking_id=booking.id,
            customer_id=booking.customer_id,
            customer_name=booking.customer.full_name,
            customer_email=booking.customer.email,
            barber_id=booking.barber_id,
            barber_user_id=barber_user.id,
            barber_name=barber_user.full_name,
            barber_email=barber_user.email,
            date=start.date(),
            time=start.strftime('%H:%M'),
            services=[
                {'name': item.service.name, 'price': str(item.price_at_booking)}
                for item in booking.line_items.select_related('service').order_by('position')
            ],
            total_amount=booking.total_price,
        )

    def email_context(self) -> dict:
        """JSON-serializable context for the email templates."""
        return {
            'booking_id': str(self.booking_id),
            'customer_name': self.customer_name,
            'barber_name': self.barber_name,
            'date': self.date.strftime('%d/%m/%Y'),
            'time': self.time,
            'services': self.services,
            'total_amount': str(self.total_amount),
            'bookings_url': f"{settings.FRONTEND_URL}/bookings",
        }


@dataclass
class ChannelResult:
    channel: str
    success: bool
    error: Optional[str] = None


@dataclass
class DispatchResult:
    success: bool
    results: List[ChannelResult] = field(default_factory=list)

    @property
    def failed_channels(self) -> List[str]:
        return [r.channel for r in self.results if not r.success]


class BookingNotificationDispatcher:
    """
    Sends the "booking created" notifications.

    Example usage:
        dispatcher = BookingNotificationDispatcher()
        result = dispatcher.send_booking_notifications(details)
        if not result.success:
            ...  # result.failed_channels
    """

    def channels(self) -> List[tuple]:
        return [
            (CHANNEL_IN_APP, self.create_barber_notification),
            (CHANNEL_CUSTOMER_EMAIL, self.send_customer_email),
            (CHANNEL_BARBER_EMAIL, self.send_barber_email),
        ]

    def send_booking_notifications(self, details: BookingNotificationDetails) -> DispatchResult:
        logger.info(f"Sending booking notifications for booking {details.booking_id}")

        results = []
        for channel, send in self.channels():
            results.append(self._attempt(channel, send, details))

        result = DispatchResult(success=all(r.success for r in results), results=results)
        if result.success:
            logger.info(f"All notifications sent for booking {details.booking_id}")
        else:
            logger.warning(
                f"Some notifications were not sent for booking {details.booking_id}: "
                f"{', '.join(result.failed_channels)}"
            )
        return result

    def _attempt(
        self,
        channel: str,
        send: Callable[[BookingNotificationDetails], None],
        details: BookingNotificationDetails,
    ) -> ChannelResult:
        try:
            send(details)
        except Exception as e:
            logger.warning(f"Notification channel {channel} failed for booking {details.booking_id}: {e}")
            return ChannelResult(channel=channel, success=False, error=str(e))
        return ChannelResult(channel=channel, success=True)

    def create_barber_notification(self, details: BookingNotificationDetails) -> Notification:
        return Notification.objects.create(
            user_id=details.barber_user_id,
            title='New booking',
            message=(
                f"New booking from {details.customer_name} "
                f"on {details.date:%d/%m/%Y} at {details.time}"
            ),
            notification_type=NotificationType.NEW_BOOKING,
            related_object_type='booking',
            related_object_id=details.booking_id,
            metadata={
                'booking_id': str(details.booking_id),
                'services': ', '.join(s['name'] for s in details.services),
                'total_amount': str(details.total_amount),
            },
        )

    def send_customer_email(self, details: BookingNotificationDetails) -> None:
        send_booking_email_task.delay(
            notification_type=NotificationType.BOOKING_CONFIRMATION.value,
            recipient_email=details.customer_email,
            recipient_name=details.customer_name,
            context=details.email_context(),
        )

    def send_barber_email(self, details: BookingNotificationDetails) -> None:
        send_booking_email_task.delay(
            notification_type=NotificationType.NEW_BOOKING.value,
            recipient_email=details.barber_email,
            recipient_name=details.barber_name,
            context=details.email_context(),
        )

    def send_cancellation_notification(self, details: BookingNotificationDetails) -> ChannelResult:
        """Best-effort in-app notice to the barber that a booking was cancelled."""
        return self._attempt(CHANNEL_IN_APP, self._create_cancellation_notification, details)

    def _create_cancellation_notification(self, details: BookingNotificationDetails) -> Notification:
        return Notification.objects.create(
            user_id=details.barber_user_id,
            title='Booking cancelled',
            message=(
                f"{details.customer_name} cancelled the booking "
                f"on {details.date:%d/%m/%Y} at {details.time}"
            ),
            notification_type=NotificationType.BOOKING_CANCELLATION,
            related_object_type='booking',
            related_object_id=details.booking_id,
        )
