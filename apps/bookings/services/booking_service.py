"""
Booking service: reservation, cancellation and completion.

Creating a booking is a check-then-insert that must not race with another
writer for the same barber. The barber row is locked with SELECT ... FOR UPDATE
inside one transaction, the free interval is re-verified against committed
bookings, and only then are the booking and its line items inserted.
Notifications go out after commit and can only produce warnings.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.authentication.models import User
from apps.barbers.models import Barber
from apps.bookings.models import Booking, BookingService as BookingLineItem
from apps.core.exceptions import (
    BookingPermissionError,
    BookingValidationError,
    InvalidBookingState,
    NotFoundError,
    SlotConflictError,
    TransientStoreError,
)
from apps.core.messages import BOOKING, NOTIFICATION
from apps.core.utils.constants import (
    BOOKING_STATUS_COMPLETED,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_PENDING,
    USER_ROLE_ADMIN,
)
from apps.notifications.services.dispatcher import (
    BookingNotificationDetails,
    BookingNotificationDispatcher,
)
from apps.schedules.services.availability import AvailabilityService, overlaps
from apps.services.models import Service

logger = logging.getLogger(__name__)


@dataclass
class BookingRequest:
    customer_id: UUID
    barber_id: UUID
    service_ids: Sequence[UUID]
    start: datetime
    note: str = ''
    idempotency_key: Optional[str] = None


@dataclass
class BookingResult:
    booking: Booking
    notification_warnings: List[str] = field(default_factory=list)
    replayed: bool = False


class BookingService:
    """
    Example usage:
        service = BookingService()
        result = service.create_booking(BookingRequest(...))
        result.booking.id, result.notification_warnings
    """

    def __init__(self, dispatcher: Optional[BookingNotificationDispatcher] = None):
        self.dispatcher = dispatcher or BookingNotificationDispatcher()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_booking(self, request: BookingRequest) -> BookingResult:
        """
        Reserve the interval [start, start + sum(service durations)) for the barber.

        Raises:
            BookingValidationError: empty or duplicated services, naive start,
                idempotency key reused for a different booking
            NotFoundError: customer, barber or a service does not exist
            SlotConflictError: interval outside working hours, on a closure
                or overlapping an occupying booking
            TransientStoreError: the store failed before commit
        """
        self._validate_request(request)
        start = request.start.replace(second=0, microsecond=0)

        try:
            customer = self._get_customer(request.customer_id)
            services = self._get_services(request.service_ids)
            total_duration = sum(s.duration_minutes for s in services)
            total_price = sum((s.price for s in services), Decimal('0'))
            warnings: List[str] = []

            with transaction.atomic():
                barber = self._lock_barber(request.barber_id)

                if request.idempotency_key:
                    existing = self._find_replay(customer, request.idempotency_key)
                    if existing is not None:
                        if not self._same_request(existing, request.barber_id, start, request.service_ids):
                            logger.warning(
                                f"Idempotency key {request.idempotency_key} reused by customer {customer.id} "
                                f"for a different booking than {existing.id}"
                            )
                            raise BookingValidationError(BOOKING['idempotency_mismatch']['error'])
                        logger.info(
                            f"Replaying booking {existing.id} for idempotency key {request.idempotency_key}"
                        )
                        return BookingResult(booking=existing, replayed=True)

                self._ensure_slot_free(barber, start, total_duration)

                booking = Booking.objects.create(
                    customer=customer,
                    barber=barber,
                    start_datetime=start,
                    status=BOOKING_STATUS_CONFIRMED,
                    note=request.note or '',
                    idempotency_key=request.idempotency_key or None,
                    total_price=total_price,
                    total_duration_minutes=total_duration,
                )
                BookingLineItem.objects.bulk_create([
                    BookingLineItem(
                        booking=booking,
                        service=service,
                        position=position,
                        price_at_booking=service.price,
                        duration_minutes=service.duration_minutes,
                    )
                    for position, service in enumerate(services)
                ])

                transaction.on_commit(lambda: warnings.extend(self._notify_created(booking)))

        except DatabaseError as e:
            logger.error(f"Booking store failure for barber {request.barber_id}: {e}")
            raise TransientStoreError(BOOKING['store_unavailable']['error'])

        logger.info(
            f"Booking {booking.id} created: barber={barber.id} customer={customer.id} "
            f"start={start.isoformat()} duration={total_duration}"
        )
        return BookingResult(booking=booking, notification_warnings=warnings)

    def _validate_request(self, request: BookingRequest) -> None:
        if not request.service_ids:
            raise BookingValidationError(BOOKING['no_services']['error'])
        if len({str(s) for s in request.service_ids}) != len(request.service_ids):
            raise BookingValidationError(BOOKING['duplicate_services']['error'])
        if request.start is None or timezone.is_naive(request.start):
            raise BookingValidationError('Start time must be timezone-aware.')

    def _get_customer(self, customer_id) -> User:
        try:
            return User.objects.get(id=customer_id, is_active=True)
        except User.DoesNotExist:
            raise NotFoundError('customer')

    def _get_services(self, service_ids) -> List[Service]:
        found = {
            str(s.id): s
            for s in Service.objects.filter(id__in=list(service_ids), is_active=True)
        }
        missing = [str(sid) for sid in service_ids if str(sid) not in found]
        if missing:
            raise NotFoundError('service', f"Service not found: {', '.join(missing)}.")
        # Keep the order the customer chose
        return [found[str(sid)] for sid in service_ids]

    def _lock_barber(self, barber_id) -> Barber:
        try:
            return Barber.objects.select_for_update().get(id=barber_id, is_active=True)
        except Barber.DoesNotExist:
            raise NotFoundError('barber')

    def _find_replay(self, customer: User, idempotency_key: str) -> Optional[Booking]:
        window_start = timezone.now() - timedelta(minutes=settings.BOOKING_IDEMPOTENCY_WINDOW_MINUTES)
        return Booking.objects.filter(
            customer=customer,
            idempotency_key=idempotency_key,
            created_at__gte=window_start
        ).order_by('-created_at').first()

    def _same_request(self, booking: Booking, barber_id, start: datetime, service_ids) -> bool:
        booked_services = [
            str(service_id)
            for service_id in booking.line_items.order_by('position').values_list('service_id', flat=True)
        ]
        return (
            str(booking.barber_id) == str(barber_id)
            and booking.start_datetime == start
            and booked_services == [str(s) for s in service_ids]
        )

    def _ensure_slot_free(self, barber: Barber, start: datetime, duration_minutes: int) -> None:
        """Re-check the interval against committed rows. Caller holds the barber lock."""
        availability = AvailabilityService(
            barber_id=barber.id,
            target_date=timezone.localtime(start).date(),
            duration_minutes=duration_minutes,
            barber=barber,
        )

        if availability.is_closed():
            logger.info(f"Booking rejected: barber {barber.id} closed on {availability.target_date}")
            raise SlotConflictError(BOOKING['barber_closed']['error'])

        if not availability.fits_working_hours(start):
            logger.info(f"Booking rejected: {start.isoformat()} outside working hours of barber {barber.id}")
            raise SlotConflictError(BOOKING['outside_working_hours']['error'])

        end = start + timedelta(minutes=duration_minutes)
        for busy in availability.get_busy_intervals():
            if overlaps(start, end, busy.start, busy.end):
                logger.info(
                    f"Booking conflict for barber {barber.id}: "
                    f"{start.isoformat()}-{end.isoformat()} overlaps {busy.start.isoformat()}-{busy.end.isoformat()}"
                )
                raise SlotConflictError(BOOKING['slot_not_available']['error'])

    def _notify_created(self, booking: Booking) -> List[str]:
        """Dispatch notifications; failures come back as user-facing warnings."""
        try:
            details = BookingNotificationDetails.from_booking(booking)
            result = self.dispatcher.send_booking_notifications(details)
        except Exception as e:
            logger.exception(f"Notification dispatch failed for booking {booking.id}: {e}")
            return [NOTIFICATION['channel_failed'].format(channel='booking')]

        return [
            NOTIFICATION['channel_failed'].format(channel=r.channel.replace('_', ' '))
            for r in result.results
            if not r.success
        ]

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    def cancel_booking(self, requester_id, requester_role: str, booking_id) -> None:
        """
        Delete a booking and its line items as one unit.

        Raises:
            NotFoundError: no such booking (including one already cancelled)
            BookingPermissionError: requester is neither the owner nor an admin
            TransientStoreError: the store failed before commit
        """
        try:
            booking = self._get_booking(booking_id)

            if str(booking.customer_id) != str(requester_id) and requester_role != USER_ROLE_ADMIN:
                logger.warning(f"User {requester_id} tried to cancel booking {booking_id} of another customer")
                raise BookingPermissionError(BOOKING['cannot_cancel']['error'])

            details = BookingNotificationDetails.from_booking(booking)

            with transaction.atomic():
                BookingLineItem.objects.filter(booking_id=booking.id).delete()
                deleted, _ = Booking.objects.filter(id=booking.id).delete()
                if not deleted:
                    # Removed by a concurrent request after we loaded it
                    raise NotFoundError('booking')

                transaction.on_commit(lambda: self._notify_cancelled(details))

        except DatabaseError as e:
            logger.error(f"Booking store failure cancelling {booking_id}: {e}")
            raise TransientStoreError(BOOKING['store_unavailable']['error'])

        logger.info(f"Booking {booking_id} cancelled by {requester_role} {requester_id}")

    def _notify_cancelled(self, details: BookingNotificationDetails) -> None:
        try:
            self.dispatcher.send_cancellation_notification(details)
        except Exception as e:
            logger.warning(f"Cancellation notification failed for booking {details.booking_id}: {e}")

    # ------------------------------------------------------------------
    # Complete
    # ------------------------------------------------------------------

    def complete_booking(self, requester: User, booking_id) -> Booking:
        """
        Mark a pending or confirmed booking as completed.
        Allowed for admins and for the barber the booking belongs to.
        """
        try:
            with transaction.atomic():
                try:
                    booking = Booking.objects.select_for_update().get(id=booking_id)
                except (Booking.DoesNotExist, ValidationError):
                    raise NotFoundError('booking')

                is_own_barber = Barber.objects.filter(id=booking.barber_id, user_id=requester.id).exists()
                if not requester.is_admin() and not is_own_barber:
                    raise BookingPermissionError()

                if booking.status not in (BOOKING_STATUS_PENDING, BOOKING_STATUS_CONFIRMED):
                    raise InvalidBookingState(BOOKING['cannot_complete']['error'])

                booking.status = BOOKING_STATUS_COMPLETED
                booking.save(update_fields=['status', 'updated_at'])

        except DatabaseError as e:
            logger.error(f"Booking store failure completing {booking_id}: {e}")
            raise TransientStoreError(BOOKING['store_unavailable']['error'])

        logger.info(f"Booking {booking_id} marked completed by {requester.id}")
        return booking

    def _get_booking(self, booking_id) -> Booking:
        try:
            return Booking.objects.select_related('customer', 'barber__user').get(id=booking_id)
        except (Booking.DoesNotExist, ValidationError):
            # Malformed ids name no booking
            raise NotFoundError('booking')
