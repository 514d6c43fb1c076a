"""Tests for the booking writer: reservation, conflicts, idempotency and store failures."""

import random
import threading
import uuid
from datetime import timedelta
from decimal import Decimal
from itertools import combinations
from unittest import mock

import pytest
from django.db import OperationalError, connection
from django.utils import timezone

from apps.bookings.models import Booking, BookingService as BookingLineItem
from apps.bookings.services.booking_service import BookingRequest, BookingService
from apps.core.exceptions import (
    BookingValidationError,
    NotFoundError,
    SlotConflictError,
    TransientStoreError,
)
from apps.core.utils.constants import BOOKING_STATUS_CONFIRMED
from apps.schedules.models import Closure
from apps.schedules.services.availability import overlaps
from tests.conftest import RecordingDispatcher, at, book, make_barber, make_user


def request_for(customer, barber, services, start, **kwargs):
    return BookingRequest(
        customer_id=customer.id,
        barber_id=barber.id,
        service_ids=[s.id for s in services],
        start=start,
        **kwargs
    )


@pytest.mark.django_db
class TestCreateBooking:

    def test_creates_confirmed_booking_with_totals(self, booking_service, customer, barber, haircut, beard, monday):
        result = booking_service.create_booking(
            request_for(customer, barber, [haircut, beard], at(monday, 10), note='Corto ai lati')
        )

        booking = result.booking
        assert booking.status == BOOKING_STATUS_CONFIRMED
        assert booking.total_price == Decimal('30.00')
        assert booking.total_duration_minutes == 60
        assert booking.end_datetime == at(monday, 11)
        assert booking.note == 'Corto ai lati'
        assert result.replayed is False

    def test_line_items_snapshot_price_and_duration(self, booking_service, customer, barber, haircut, beard, monday):
        result = booking_service.create_booking(request_for(customer, barber, [beard, haircut], at(monday, 10)))
        haircut.price = Decimal('25.00')
        haircut.duration_minutes = 45
        haircut.save()

        items = list(BookingLineItem.objects.filter(booking=result.booking).order_by('position'))

        assert [i.service_id for i in items] == [beard.id, haircut.id]
        assert items[1].price_at_booking == Decimal('20.00')
        assert items[1].duration_minutes == 30

    def test_notifications_are_sent_after_commit(
        self, django_capture_on_commit_callbacks, dispatcher, booking_service, customer, barber, haircut, monday
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))

        assert [d.booking_id for d in dispatcher.sent] == [result.booking.id]
        assert dispatcher.sent[0].time == '10:00'
        assert result.notification_warnings == []

    def test_seconds_are_dropped(self, booking_service, customer, barber, haircut, monday):
        start = at(monday, 10) + timedelta(seconds=42)
        result = booking_service.create_booking(request_for(customer, barber, [haircut], start))
        assert result.booking.start_datetime == at(monday, 10)


@pytest.mark.django_db
class TestCreateBookingValidation:

    def test_empty_services(self, booking_service, customer, barber, monday):
        with pytest.raises(BookingValidationError):
            booking_service.create_booking(request_for(customer, barber, [], at(monday, 10)))

    def test_duplicate_services(self, booking_service, customer, barber, haircut, monday):
        with pytest.raises(BookingValidationError):
            booking_service.create_booking(request_for(customer, barber, [haircut, haircut], at(monday, 10)))

    def test_naive_start(self, booking_service, customer, barber, haircut, monday):
        naive = timezone.make_naive(at(monday, 10))
        with pytest.raises(BookingValidationError):
            booking_service.create_booking(request_for(customer, barber, [haircut], naive))

    def test_unknown_service(self, booking_service, customer, barber, haircut, monday):
        request = request_for(customer, barber, [haircut], at(monday, 10))
        request.service_ids = [haircut.id, uuid.uuid4()]

        with pytest.raises(NotFoundError) as exc_info:
            booking_service.create_booking(request)
        assert exc_info.value.resource == 'service'

    def test_inactive_service(self, booking_service, customer, barber, haircut, monday):
        haircut.is_active = False
        haircut.save()

        with pytest.raises(NotFoundError):
            booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))

    def test_unknown_barber(self, booking_service, customer, barber, haircut, monday):
        request = request_for(customer, barber, [haircut], at(monday, 10))
        request.barber_id = uuid.uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            booking_service.create_booking(request)
        assert exc_info.value.resource == 'barber'

    def test_unknown_customer(self, booking_service, customer, barber, haircut, monday):
        request = request_for(customer, barber, [haircut], at(monday, 10))
        request.customer_id = uuid.uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            booking_service.create_booking(request)
        assert exc_info.value.resource == 'customer'


@pytest.mark.django_db
class TestConflicts:

    def test_same_slot_second_writer_conflicts(self, booking_service, customer, other_customer, barber, haircut, monday):
        booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))

        with pytest.raises(SlotConflictError):
            booking_service.create_booking(request_for(other_customer, barber, [haircut], at(monday, 10)))

        assert Booking.objects.filter(barber=barber).count() == 1

    def test_partial_overlap_conflicts(self, booking_service, customer, other_customer, barber, combo, haircut, monday):
        booking_service.create_booking(request_for(customer, barber, [combo], at(monday, 10)))

        with pytest.raises(SlotConflictError):
            booking_service.create_booking(request_for(other_customer, barber, [haircut], at(monday, 10, 30)))
        with pytest.raises(SlotConflictError):
            booking_service.create_booking(request_for(other_customer, barber, [combo], at(monday, 9, 30)))

    def test_back_to_back_is_allowed(self, booking_service, customer, other_customer, barber, combo, monday):
        booking_service.create_booking(request_for(customer, barber, [combo], at(monday, 10)))
        booking_service.create_booking(request_for(other_customer, barber, [combo], at(monday, 11)))
        booking_service.create_booking(request_for(other_customer, barber, [combo], at(monday, 9)))

        assert Booking.objects.filter(barber=barber).count() == 3

    def test_different_barbers_same_time(self, booking_service, customer, other_customer, barber, other_barber, haircut, monday):
        booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))
        booking_service.create_booking(request_for(other_customer, other_barber, [haircut], at(monday, 10)))

        assert Booking.objects.count() == 2

    def test_ending_after_working_hours(self, booking_service, customer, barber, combo, monday):
        with pytest.raises(SlotConflictError):
            booking_service.create_booking(request_for(customer, barber, [combo], at(monday, 17, 30)))

    def test_starting_before_working_hours(self, booking_service, customer, barber, haircut, monday):
        with pytest.raises(SlotConflictError):
            booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 8, 30)))

    def test_day_off(self, booking_service, customer, barber, haircut, sunday):
        with pytest.raises(SlotConflictError):
            booking_service.create_booking(request_for(customer, barber, [haircut], at(sunday, 10)))

    def test_closure(self, booking_service, customer, barber, haircut, monday):
        Closure.objects.create(barber=None, date=monday, reason='Festa patronale')

        with pytest.raises(SlotConflictError):
            booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))

    def test_no_overlap_after_random_sequence(self, booking_service, barber, haircut, combo, monday):
        rng = random.Random(7)
        customers = [make_user(f'customer{i}@example.com') for i in range(4)]

        for _ in range(40):
            services = rng.choice([[haircut], [combo]])
            hour, minute = rng.randint(9, 17), rng.choice([0, 30])
            try:
                booking_service.create_booking(
                    request_for(rng.choice(customers), barber, services, at(monday, hour, minute))
                )
            except SlotConflictError:
                pass

        bookings = list(Booking.objects.filter(barber=barber))
        assert bookings
        for a, b in combinations(bookings, 2):
            assert not overlaps(a.start_datetime, a.end_datetime, b.start_datetime, b.end_datetime)


@pytest.mark.django_db
class TestIdempotency:

    def test_replay_returns_original_booking(self, booking_service, customer, barber, haircut, monday):
        first = booking_service.create_booking(
            request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='form-1')
        )
        second = booking_service.create_booking(
            request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='form-1')
        )

        assert second.replayed is True
        assert second.booking.id == first.booking.id
        assert Booking.objects.count() == 1

    def test_key_reused_for_another_start_is_rejected(self, booking_service, customer, barber, haircut, monday):
        booking_service.create_booking(
            request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='k1')
        )

        with pytest.raises(BookingValidationError):
            booking_service.create_booking(
                request_for(customer, barber, [haircut], at(monday, 15), idempotency_key='k1')
            )

        assert Booking.objects.count() == 1

    def test_key_reused_for_other_services_is_rejected(
        self, booking_service, customer, barber, haircut, beard, monday
    ):
        booking_service.create_booking(
            request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='k1')
        )

        with pytest.raises(BookingValidationError):
            booking_service.create_booking(
                request_for(customer, barber, [haircut, beard], at(monday, 10), idempotency_key='k1')
            )

    def test_key_reused_for_another_barber_is_rejected(
        self, booking_service, customer, barber, other_barber, haircut, monday
    ):
        booking_service.create_booking(
            request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='k1')
        )

        with pytest.raises(BookingValidationError):
            booking_service.create_booking(
                request_for(customer, other_barber, [haircut], at(monday, 10), idempotency_key='k1')
            )

        assert not Booking.objects.filter(barber=other_barber).exists()

    def test_key_is_scoped_to_customer(self, booking_service, customer, other_customer, barber, haircut, monday):
        booking_service.create_booking(
            request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='form-1')
        )
        result = booking_service.create_booking(
            request_for(other_customer, barber, [haircut], at(monday, 11), idempotency_key='form-1')
        )

        assert result.replayed is False
        assert Booking.objects.count() == 2

    def test_key_expires_after_window(self, settings, booking_service, customer, barber, haircut, monday):
        first = booking_service.create_booking(
            request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='form-1')
        )
        Booking.objects.filter(id=first.booking.id).update(
            created_at=timezone.now() - timedelta(minutes=settings.BOOKING_IDEMPOTENCY_WINDOW_MINUTES + 1)
        )

        # Same interval is taken by the first booking, so the retry is a fresh attempt
        with pytest.raises(SlotConflictError):
            booking_service.create_booking(
                request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='form-1')
            )


@pytest.mark.django_db
class TestStoreFailures:

    def test_operational_error_becomes_transient(self, booking_service, customer, barber, haircut, monday):
        with mock.patch.object(Booking.objects, 'create', side_effect=OperationalError('database is locked')):
            with pytest.raises(TransientStoreError):
                booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))

        assert Booking.objects.count() == 0

    def test_line_item_failure_leaves_nothing_behind(self, booking_service, customer, barber, haircut, monday):
        with mock.patch.object(BookingLineItem.objects, 'bulk_create', side_effect=OperationalError('disk I/O error')):
            with pytest.raises(TransientStoreError):
                booking_service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))

        assert Booking.objects.count() == 0
        assert BookingLineItem.objects.count() == 0

    def test_retry_after_failure_succeeds(self, booking_service, customer, barber, haircut, monday):
        request = request_for(customer, barber, [haircut], at(monday, 10), idempotency_key='retry-1')
        with mock.patch.object(Booking.objects, 'create', side_effect=OperationalError('database is locked')):
            with pytest.raises(TransientStoreError):
                booking_service.create_booking(request)

        result = booking_service.create_booking(request)

        assert result.replayed is False
        assert Booking.objects.count() == 1


@pytest.mark.django_db(transaction=True)
def test_concurrent_writers_get_one_booking(monday, haircut):
    """Racing writers for one slot: exactly one wins, every other one sees the conflict."""
    barber = make_barber('race@barbershop.local')
    customers = [make_user(f'racer{i}@example.com') for i in range(6)]
    barrier = threading.Barrier(len(customers))
    outcomes = []
    lock = threading.Lock()

    def attempt(customer):
        service = BookingService(dispatcher=RecordingDispatcher())
        try:
            barrier.wait()
            service.create_booking(request_for(customer, barber, [haircut], at(monday, 10)))
            result = 'ok'
        except SlotConflictError:
            result = 'conflict'
        except TransientStoreError:
            result = 'transient'
        finally:
            connection.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(c,)) for c in customers]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count('ok') == 1
    assert outcomes.count('conflict') == len(customers) - 1
    assert Booking.objects.filter(barber=barber).count() == 1


@pytest.mark.django_db
def test_book_helper_uses_recording_dispatcher(customer, barber, haircut, monday):
    result = book(customer, barber, [haircut], monday, 9)
    assert result.booking.start_datetime == at(monday, 9)
