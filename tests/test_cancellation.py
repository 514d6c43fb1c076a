"""Tests for cancelling and completing bookings."""

import uuid

import pytest

from apps.bookings.models import Booking, BookingService as BookingLineItem
from apps.core.exceptions import BookingPermissionError, InvalidBookingState, NotFoundError
from apps.core.utils.constants import (
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    USER_ROLE_ADMIN,
    USER_ROLE_CUSTOMER,
)
from apps.notifications.models import Notification, NotificationType
from apps.notifications.services.dispatcher import BookingNotificationDispatcher
from apps.bookings.services.booking_service import BookingService
from apps.schedules.services.availability import compute_available_slots
from tests.conftest import book


@pytest.mark.django_db
class TestCancelBooking:

    def test_cancel_frees_the_slot(self, booking_service, customer, other_customer, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking
        assert '10:00' not in compute_available_slots(barber.id, monday, 30)

        booking_service.cancel_booking(customer.id, USER_ROLE_CUSTOMER, booking.id)

        assert '10:00' in compute_available_slots(barber.id, monday, 30)
        rebooked = book(other_customer, barber, [haircut], monday, 10)
        assert rebooked.booking.id != booking.id

    def test_booking_and_line_items_are_deleted(self, booking_service, customer, barber, haircut, beard, monday):
        booking = book(customer, barber, [haircut, beard], monday, 10).booking

        booking_service.cancel_booking(customer.id, USER_ROLE_CUSTOMER, booking.id)

        assert not Booking.objects.filter(id=booking.id).exists()
        assert not BookingLineItem.objects.filter(booking_id=booking.id).exists()

    def test_cancelling_twice_is_not_found(self, booking_service, customer, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking
        booking_service.cancel_booking(customer.id, USER_ROLE_CUSTOMER, booking.id)

        with pytest.raises(NotFoundError):
            booking_service.cancel_booking(customer.id, USER_ROLE_CUSTOMER, booking.id)

    def test_unknown_booking(self, booking_service, customer):
        with pytest.raises(NotFoundError):
            booking_service.cancel_booking(customer.id, USER_ROLE_CUSTOMER, uuid.uuid4())

    def test_malformed_booking_id(self, booking_service, customer):
        with pytest.raises(NotFoundError):
            booking_service.cancel_booking(customer.id, USER_ROLE_CUSTOMER, 'a' * 35 + '-')

    def test_other_customer_cannot_cancel(self, booking_service, customer, other_customer, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking

        with pytest.raises(BookingPermissionError):
            booking_service.cancel_booking(other_customer.id, USER_ROLE_CUSTOMER, booking.id)

        assert Booking.objects.filter(id=booking.id).exists()

    def test_admin_can_cancel_any_booking(self, booking_service, customer, admin_user, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking

        booking_service.cancel_booking(admin_user.id, USER_ROLE_ADMIN, booking.id)

        assert not Booking.objects.filter(id=booking.id).exists()

    def test_cancellation_notifies_barber(
        self, django_capture_on_commit_callbacks, customer, barber, haircut, monday
    ):
        booking = book(customer, barber, [haircut], monday, 10).booking
        service = BookingService(dispatcher=BookingNotificationDispatcher())

        with django_capture_on_commit_callbacks(execute=True):
            service.cancel_booking(customer.id, USER_ROLE_CUSTOMER, booking.id)

        notification = Notification.objects.get(notification_type=NotificationType.BOOKING_CANCELLATION)
        assert notification.user_id == barber.user_id
        assert notification.related_object_id == booking.id

    def test_cancellation_notification_failure_is_swallowed(
        self, django_capture_on_commit_callbacks, customer, barber, haircut, monday
    ):
        class BrokenDispatcher(BookingNotificationDispatcher):
            def send_cancellation_notification(self, details):
                raise RuntimeError('push gateway down')

        booking = book(customer, barber, [haircut], monday, 10).booking

        with django_capture_on_commit_callbacks(execute=True):
            BookingService(dispatcher=BrokenDispatcher()).cancel_booking(
                customer.id, USER_ROLE_CUSTOMER, booking.id
            )

        assert not Booking.objects.filter(id=booking.id).exists()


@pytest.mark.django_db
class TestCompleteBooking:

    def test_barber_completes_own_booking(self, booking_service, customer, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking

        completed = booking_service.complete_booking(barber.user, booking.id)

        assert completed.status == BOOKING_STATUS_COMPLETED
        assert '10:00' not in compute_available_slots(barber.id, monday, 30)

    def test_admin_completes_booking(self, booking_service, customer, admin_user, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking

        assert booking_service.complete_booking(admin_user, booking.id).status == BOOKING_STATUS_COMPLETED

    def test_other_barber_cannot_complete(self, booking_service, customer, barber, other_barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking

        with pytest.raises(BookingPermissionError):
            booking_service.complete_booking(other_barber.user, booking.id)

    def test_customer_cannot_complete(self, booking_service, customer, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking

        with pytest.raises(BookingPermissionError):
            booking_service.complete_booking(customer, booking.id)

    def test_completing_twice_is_invalid(self, booking_service, customer, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking
        booking_service.complete_booking(barber.user, booking.id)

        with pytest.raises(InvalidBookingState):
            booking_service.complete_booking(barber.user, booking.id)

    def test_cancelled_status_cannot_be_completed(self, booking_service, customer, barber, haircut, monday):
        booking = book(customer, barber, [haircut], monday, 10).booking
        Booking.objects.filter(id=booking.id).update(status=BOOKING_STATUS_CANCELLED)

        with pytest.raises(InvalidBookingState):
            booking_service.complete_booking(barber.user, booking.id)

    def test_unknown_booking(self, booking_service, admin_user):
        with pytest.raises(NotFoundError):
            booking_service.complete_booking(admin_user, uuid.uuid4())

    def test_malformed_booking_id(self, booking_service, admin_user):
        with pytest.raises(NotFoundError):
            booking_service.complete_booking(admin_user, 'not-a-uuid')
