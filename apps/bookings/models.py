"""
Booking models
"""
from datetime import timedelta

from django.conf import settings
from django.db import models
from apps.core.models import BaseModel
from apps.core.utils.constants import BOOKING_STATUSES, BOOKING_STATUS_CONFIRMED


class Booking(BaseModel):
    """
    Booking model for appointments.
    Occupies [start_datetime, start_datetime + total_duration_minutes).
    """
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    barber = models.ForeignKey(
        'barbers.Barber',
        on_delete=models.PROTECT,
        related_name='bookings'
    )

    # Booking details
    start_datetime = models.DateTimeField(db_index=True)
    status = models.CharField(
        max_length=20,
        choices=BOOKING_STATUSES,
        default=BOOKING_STATUS_CONFIRMED,
        db_index=True
    )

    # Snapshot totals of the line items
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_duration_minutes = models.PositiveIntegerField()

    # Additional info
    note = models.TextField(blank=True)
    idempotency_key = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        db_table = 'bookings'
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-start_datetime']
        indexes = [
            models.Index(fields=['customer', 'status'], name='bookings_customer_status_idx'),
            models.Index(fields=['barber', 'start_datetime'], name='bookings_barber_start_idx'),
            models.Index(fields=['customer', 'idempotency_key'], name='bookings_customer_idem_idx'),
        ]

    def __str__(self):
        return f"{self.customer.full_name} - {self.barber} - {self.start_datetime}"

    @property
    def end_datetime(self):
        return self.start_datetime + timedelta(minutes=self.total_duration_minutes)


class BookingService(models.Model):
    """
    Line item of a booking. Price and duration are copied from the service
    at booking time so later catalog edits don't change past bookings.
    """
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='line_items'
    )
    service = models.ForeignKey(
        'services.Service',
        on_delete=models.PROTECT,
        related_name='booking_items'
    )
    position = models.PositiveSmallIntegerField(default=0)
    price_at_booking = models.DecimalField(max_digits=10, decimal_places=2)
    duration_minutes = models.PositiveIntegerField()

    class Meta:
        db_table = 'booking_services'
        verbose_name = 'Booking Service'
        verbose_name_plural = 'Booking Services'
        ordering = ['booking', 'position']
        unique_together = ['booking', 'service']

    def __str__(self):
        return f"{self.service.name} @ {self.price_at_booking}"
