"""
Booking serializers
"""
from datetime import datetime

from rest_framework import serializers
from django.utils import timezone

from apps.core.messages import BOOKING
from apps.core.utils.constants import MAX_APPOINTMENT_MINUTES
from .models import Booking, BookingService
from .services.booking_service import BookingRequest


class AvailableTimesQuerySerializer(serializers.Serializer):
    """Query parameters of the available-times endpoint"""
    barberId = serializers.UUIDField()
    date = serializers.DateField(input_formats=['%Y-%m-%d'])
    duration = serializers.IntegerField(
        min_value=1,
        max_value=MAX_APPOINTMENT_MINUTES,
        error_messages={
            'min_value': BOOKING['invalid_duration']['error'],
            'max_value': BOOKING['duration_too_long']['error'],
        }
    )

    def validate_date(self, value):
        if value < timezone.localdate():
            raise serializers.ValidationError(BOOKING['past_date']['error'])
        return value


class BookingCreateSerializer(serializers.Serializer):
    """
    Input serializer for creating bookings.
    Field names follow the public booking form.
    """
    barberId = serializers.UUIDField()
    servizi = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=False,
        error_messages={'empty': BOOKING['no_services']['error']}
    )
    data = serializers.DateField(input_formats=['%Y-%m-%d'])
    ora = serializers.TimeField(input_formats=['%H:%M'])
    note = serializers.CharField(required=False, allow_blank=True, max_length=500, default='')
    idempotencyKey = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate_servizi(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError(BOOKING['duplicate_services']['error'])
        return value

    def validate(self, data):
        start = timezone.make_aware(datetime.combine(data['data'], data['ora']))
        if start < timezone.now():
            raise serializers.ValidationError({'data': BOOKING['past_date']['error']})
        data['start'] = start
        return data

    def to_booking_request(self, customer_id, idempotency_key=None) -> BookingRequest:
        validated = self.validated_data
        return BookingRequest(
            customer_id=customer_id,
            barber_id=validated['barberId'],
            service_ids=list(validated['servizi']),
            start=validated['start'],
            note=validated.get('note', ''),
            idempotency_key=validated.get('idempotencyKey') or idempotency_key or None,
        )


class BookingLineItemSerializer(serializers.ModelSerializer):
    """Service line of a booking with the price and duration charged"""
    service_name = serializers.CharField(source='service.name', read_only=True)

    class Meta:
        model = BookingService
        fields = ['service', 'service_name', 'position', 'price_at_booking', 'duration_minutes']
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking serializer for output"""
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    barber_name = serializers.CharField(source='barber.name', read_only=True)
    end_datetime = serializers.DateTimeField(read_only=True)
    services = BookingLineItemSerializer(source='line_items', many=True, read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'customer', 'customer_name', 'barber', 'barber_name',
            'start_datetime', 'end_datetime', 'status',
            'total_price', 'total_duration_minutes', 'note', 'services',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class BookingCreateResponseSerializer(serializers.Serializer):
    """Response of the create endpoint"""
    success = serializers.BooleanField()
    bookingId = serializers.UUIDField()
    message = serializers.CharField()
    warnings = serializers.ListField(child=serializers.CharField())
    replayed = serializers.BooleanField()


class AvailableTimesResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    times = serializers.ListField(child=serializers.CharField())
