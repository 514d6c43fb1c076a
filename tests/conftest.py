"""Shared test fixtures and helpers."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.authentication.models import User
from apps.barbers.models import Barber
from apps.bookings.services.booking_service import BookingRequest, BookingService
from apps.core.utils.constants import (
    SERVICE_CATEGORY_BEARD,
    SERVICE_CATEGORY_COMBO,
    SERVICE_CATEGORY_HAIRCUT,
    USER_ROLE_ADMIN,
    USER_ROLE_BARBER,
)
from apps.notifications.services.dispatcher import (
    BookingNotificationDispatcher,
    ChannelResult,
    DispatchResult,
)
from apps.schedules.models import WorkingHours
from apps.services.models import Service


class RecordingDispatcher(BookingNotificationDispatcher):
    """Dispatcher that only records what it was asked to send."""

    def __init__(self):
        self.sent = []
        self.cancelled = []

    def send_booking_notifications(self, details):
        self.sent.append(details)
        return DispatchResult(success=True, results=[ChannelResult(channel='in_app', success=True)])

    def send_cancellation_notification(self, details):
        self.cancelled.append(details)
        return ChannelResult(channel='in_app', success=True)


def next_weekday(weekday: int, after: Optional[date] = None) -> date:
    """Next date strictly after `after` (default today) with the given weekday, 0 = Sunday."""
    day = (after or timezone.localdate()) + timedelta(days=1)
    while day.isoweekday() % 7 != weekday:
        day += timedelta(days=1)
    return day


def at(day: date, hour: int, minute: int = 0) -> datetime:
    """Aware datetime in the shop timezone."""
    return timezone.make_aware(datetime.combine(day, time(hour, minute)))


def make_user(email: str, role: str = 'customer', **extra) -> User:
    return User.objects.create_user(email=email, role=role, **extra)


def make_barber(email: str, hours=None, weekdays=range(1, 7)) -> Barber:
    """Barber working the given weekdays (default Monday to Saturday, 09:00-18:00)."""
    first_name = email.split('@')[0].capitalize()
    user = make_user(email, role=USER_ROLE_BARBER, first_name=first_name)
    barber = Barber.objects.create(user=user, specialties=['fade'])
    for weekday in weekdays:
        for start, end in hours or [(time(9), time(18))]:
            WorkingHours.objects.create(barber=barber, weekday=weekday, start_time=start, end_time=end)
    return barber


def book(customer, barber, services, day: date, hour: int, minute: int = 0, **kwargs):
    """Create a booking through the service with a recording dispatcher."""
    service = BookingService(dispatcher=kwargs.pop('dispatcher', None) or RecordingDispatcher())
    return service.create_booking(BookingRequest(
        customer_id=customer.id,
        barber_id=barber.id,
        service_ids=[s.id for s in services],
        start=at(day, hour, minute),
        **kwargs
    ))


@pytest.fixture
def customer(db):
    return make_user('mario.rossi@example.com', first_name='Mario', last_name='Rossi')


@pytest.fixture
def other_customer(db):
    return make_user('luca.bianchi@example.com', first_name='Luca', last_name='Bianchi')


@pytest.fixture
def admin_user(db):
    return make_user('admin@barbershop.local', role=USER_ROLE_ADMIN, first_name='Admin')


@pytest.fixture
def barber(db):
    return make_barber('giovanni@barbershop.local')


@pytest.fixture
def other_barber(db):
    return make_barber('paolo@barbershop.local')


@pytest.fixture
def haircut(db):
    return Service.objects.create(
        name='Taglio Classico', duration_minutes=30, price=Decimal('20.00'),
        category=SERVICE_CATEGORY_HAIRCUT
    )


@pytest.fixture
def beard(db):
    return Service.objects.create(
        name='Barba', duration_minutes=30, price=Decimal('10.00'),
        category=SERVICE_CATEGORY_BEARD
    )


@pytest.fixture
def combo(db):
    return Service.objects.create(
        name='Taglio + Barba', duration_minutes=60, price=Decimal('28.00'),
        category=SERVICE_CATEGORY_COMBO
    )


@pytest.fixture
def monday():
    return next_weekday(1)


@pytest.fixture
def sunday():
    return next_weekday(0)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def booking_service(dispatcher):
    return BookingService(dispatcher=dispatcher)


@pytest.fixture
def api_client():
    return APIClient()


def authenticate(client: APIClient, user: User) -> APIClient:
    client.credentials(HTTP_X_USER_ID=str(user.id))
    return client
