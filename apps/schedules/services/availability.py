"""
Time Slot Availability Service.

Free start times are computed on-the-fly from:
- Barber working hours for the weekday (possibly several windows)
- Closures (barber-specific or shop-wide)
- Existing occupying bookings (pending/confirmed/completed)

Nothing is cached: every call re-reads the rows.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, date, time, timedelta
from typing import Callable, Iterable, List, Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from apps.barbers.models import Barber
from apps.bookings.models import Booking
from apps.core.exceptions import BookingValidationError, NotFoundError
from apps.core.utils.constants import MAX_APPOINTMENT_MINUTES, OCCUPYING_BOOKING_STATUSES
from apps.schedules.models import Closure, WorkingHours

logger = logging.getLogger(__name__)

Observer = Callable[[str, dict], None]
Window = Tuple[datetime, datetime]


@dataclass(frozen=True)
class BusyInterval:
    """Half-open interval [start, end) occupied by a booking."""
    start: datetime
    end: datetime


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Half-open overlap test: touching intervals do not overlap."""
    return a_start < b_end and a_end > b_start


def _notify(observer: Optional[Observer], event: str, **payload) -> None:
    if observer is not None:
        observer(event, payload)


def generate_slots(
    windows: Iterable[Window],
    busy: Iterable[BusyInterval],
    duration_minutes: int,
    step_minutes: int,
    not_before: Optional[datetime] = None,
    observer: Optional[Observer] = None,
) -> List[datetime]:
    """
    Walk a fixed grid anchored at each window start and keep the candidates
    whose whole interval fits the window and overlaps no busy interval.

    Args:
        windows: (start, end) pairs of working windows
        busy: Intervals already taken
        duration_minutes: Length of the requested appointment
        step_minutes: Grid step between candidate starts
        not_before: Drop candidates starting before this instant
        observer: Optional callback receiving (event, payload) diagnostics

    Returns:
        Sorted, de-duplicated list of candidate start datetimes
    """
    if duration_minutes > MAX_APPOINTMENT_MINUTES:
        _notify(observer, 'duration_exceeds_day', duration_minutes=duration_minutes)
        return []

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)
    busy = list(busy)
    found = set()

    for window_start, window_end in windows:
        candidate = window_start
        while candidate + duration <= window_end:
            candidate_end = candidate + duration

            if not_before is not None and candidate < not_before:
                _notify(observer, 'slot_rejected', start=candidate, reason='before_not_before')
            elif any(overlaps(candidate, candidate_end, b.start, b.end) for b in busy):
                _notify(observer, 'slot_rejected', start=candidate, reason='busy')
            else:
                found.add(candidate)

            candidate += step

    return sorted(found)


def weekday_number(target_date: date) -> int:
    """Weekday numbered from Sunday (0) to Saturday (6)."""
    return target_date.isoweekday() % 7


def local_day_bounds(target_date: date) -> Window:
    """Aware [00:00, next 00:00) of target_date in the shop timezone."""
    day_start = timezone.make_aware(datetime.combine(target_date, time.min))
    day_end = timezone.make_aware(datetime.combine(target_date + timedelta(days=1), time.min))
    return day_start, day_end


class AvailabilityService:
    """
    Availability calculator for one barber on one date.

    Example usage:
        service = AvailabilityService(
            barber_id=uuid,
            target_date=date(2025, 3, 10),
            duration_minutes=60,
        )
        times = service.get_available_times()  # ['09:00', '09:30', ...]
    """

    def __init__(
        self,
        barber_id: UUID,
        target_date: date,
        duration_minutes: int,
        not_before: Optional[datetime] = None,
        step_minutes: Optional[int] = None,
        observer: Optional[Observer] = None,
        barber: Optional[Barber] = None,
    ):
        """
        Args:
            barber_id: UUID of the barber
            target_date: The date to check availability for
            duration_minutes: Requested appointment length (sum of services)
            not_before: Earliest acceptable start, used for "today"
            step_minutes: Grid step override (defaults to SLOT_STEP_MINUTES)
            observer: Diagnostics callback
            barber: Already loaded (and possibly locked) barber instance
        """
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes <= 0:
            raise BookingValidationError('Duration must be a positive number of minutes.')

        self.barber_id = barber_id
        self.target_date = target_date
        self.duration_minutes = duration_minutes
        self.not_before = not_before
        self.step_minutes = step_minutes or settings.SLOT_STEP_MINUTES
        self.observer = observer
        self._barber = barber

    @property
    def barber(self) -> Barber:
        """Fetch and cache the active barber."""
        if self._barber is None:
            try:
                self._barber = Barber.objects.select_related('user').get(
                    id=self.barber_id,
                    is_active=True
                )
            except Barber.DoesNotExist:
                raise NotFoundError('barber')
        return self._barber

    def is_closed(self) -> bool:
        """Barber-specific or shop-wide closure on the target date."""
        return Closure.objects.filter(
            Q(barber=self.barber) | Q(barber__isnull=True),
            date=self.target_date
        ).exists()

    def get_working_windows(self) -> List[Window]:
        """Aware (start, end) working windows for the target weekday."""
        rows = WorkingHours.objects.filter(
            barber=self.barber,
            weekday=weekday_number(self.target_date)
        ).order_by('start_time')

        return [
            (
                timezone.make_aware(datetime.combine(self.target_date, row.start_time)),
                timezone.make_aware(datetime.combine(self.target_date, row.end_time)),
            )
            for row in rows
        ]

    def get_busy_intervals(self) -> List[BusyInterval]:
        """Occupying bookings that start within the local day."""
        day_start, day_end = local_day_bounds(self.target_date)
        bookings = Booking.objects.filter(
            barber=self.barber,
            start_datetime__gte=day_start,
            start_datetime__lt=day_end,
            status__in=OCCUPYING_BOOKING_STATUSES
        ).only('start_datetime', 'total_duration_minutes')

        return [
            BusyInterval(start=booking.start_datetime, end=booking.end_datetime)
            for booking in bookings
        ]

    def fits_working_hours(self, start: datetime) -> bool:
        """Whether [start, start + duration) lies inside a single working window."""
        if self.duration_minutes > MAX_APPOINTMENT_MINUTES:
            return False
        end = start + timedelta(minutes=self.duration_minutes)
        return any(
            window_start <= start and end <= window_end
            for window_start, window_end in self.get_working_windows()
        )

    def get_available_slots(self) -> List[datetime]:
        """
        Main entry point - calculate the free start datetimes.

        Returns:
            Sorted list of aware datetimes in the shop timezone
        """
        barber = self.barber

        if self.is_closed():
            _notify(self.observer, 'closed', barber_id=barber.id, date=self.target_date)
            return []

        windows = self.get_working_windows()
        if not windows:
            _notify(self.observer, 'no_working_hours', barber_id=barber.id, date=self.target_date)
            return []

        busy = self.get_busy_intervals()
        slots = generate_slots(
            windows=windows,
            busy=busy,
            duration_minutes=self.duration_minutes,
            step_minutes=self.step_minutes,
            not_before=self.not_before,
            observer=self.observer,
        )

        logger.debug(
            f"Computed {len(slots)} slots for barber {barber.id} on {self.target_date} "
            f"(duration={self.duration_minutes}, busy={len(busy)})"
        )
        _notify(self.observer, 'slots_computed', barber_id=barber.id, date=self.target_date, count=len(slots))
        return slots

    def get_available_times(self) -> List[str]:
        """Free start times formatted as HH:MM local time."""
        return [timezone.localtime(slot).strftime('%H:%M') for slot in self.get_available_slots()]


def compute_available_slots(
    barber_id: UUID,
    target_date: date,
    requested_duration_minutes: int,
    *,
    not_before: Optional[datetime] = None,
    step_minutes: Optional[int] = None,
    observer: Optional[Observer] = None,
) -> List[str]:
    """
    Free "HH:MM" start times for a barber, date and requested duration.

    Raises:
        BookingValidationError: duration is not a positive int
        NotFoundError: barber is unknown or inactive
    """
    return AvailabilityService(
        barber_id=barber_id,
        target_date=target_date,
        duration_minutes=requested_duration_minutes,
        not_before=not_before,
        step_minutes=step_minutes,
        observer=observer,
    ).get_available_times()
