"""
Booking views
"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse, OpenApiExample
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import OrderingFilter
from django.utils import timezone

from apps.core.messages import BOOKING
from apps.core.permissions import IsBarberOrAdmin
from apps.schedules.services.availability import compute_available_slots
from .models import Booking
from .serializers import (
    AvailableTimesQuerySerializer,
    AvailableTimesResponseSerializer,
    BookingCreateSerializer,
    BookingCreateResponseSerializer,
    BookingSerializer,
)
from .services.booking_service import BookingService


class BookingViewSet(viewsets.GenericViewSet):
    """
    ViewSet for bookings.

    available-times is public; everything else needs an authenticated user.
    Cancelling deletes the booking and frees its interval.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = BookingSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['status', 'barber']
    ordering_fields = ['start_datetime', 'created_at', 'total_price']
    ordering = ['-start_datetime']
    lookup_value_regex = '[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'

    booking_service_class = BookingService

    def get_booking_service(self) -> BookingService:
        return self.booking_service_class()

    def get_queryset(self):
        # Handle schema generation
        if getattr(self, 'swagger_fake_view', False):
            return Booking.objects.none()

        user = self.request.user
        if not user.is_authenticated:
            return Booking.objects.none()

        return Booking.objects.select_related(
            'customer', 'barber__user'
        ).prefetch_related('line_items__service').filter(customer=user)

    def get_permissions(self):
        """Set permissions based on action"""
        if self.action == 'available_times':
            return [AllowAny()]
        elif self.action == 'complete':
            return [IsBarberOrAdmin()]
        return super().get_permissions()

    @extend_schema(
        summary="Available start times",
        description="""
        Free start times ("HH:MM", shop timezone) for a barber on a date,
        for an appointment lasting `duration` minutes.

        Slots lie on a fixed grid inside the barber's working hours and never
        overlap an existing booking. Past dates are rejected; for today only
        times from now on are returned.
        """,
        parameters=[
            OpenApiParameter('barberId', str, required=True, description='Barber UUID'),
            OpenApiParameter('date', str, required=True, description='Date (YYYY-MM-DD)'),
            OpenApiParameter('duration', int, required=True, description='Total duration in minutes'),
        ],
        responses={
            200: AvailableTimesResponseSerializer,
            400: OpenApiResponse(description="Invalid query parameters"),
            404: OpenApiResponse(description="Barber not found")
        },
        tags=['Bookings - Public']
    )
    @action(detail=False, methods=['get'], url_path='available-times', permission_classes=[AllowAny])
    def available_times(self, request):
        """Compute free start times"""
        serializer = AvailableTimesQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        target_date = serializer.validated_data['date']

        not_before = timezone.now() if target_date == timezone.localdate() else None
        times = compute_available_slots(
            serializer.validated_data['barberId'],
            target_date,
            serializer.validated_data['duration'],
            not_before=not_before,
        )
        return Response({'success': True, 'times': times})

    @extend_schema(
        summary="Create booking",
        description="""
        Book one or more services with a barber at a given date and time.

        The interval is re-checked under a per-barber lock, so two customers
        racing for the same slot get one 201 and one 409.
        Pass `idempotencyKey` (or the `Idempotency-Key` header) to make
        retries safe: a replay returns the original booking with 200.
        Reusing a key for a different booking is rejected with 400.
        """,
        request=BookingCreateSerializer,
        examples=[
            OpenApiExample(
                'Booking Example',
                value={
                    'barberId': 'b9743cc7-1364-4a32-a3b7-730a02365f00',
                    'servizi': ['d241ec69-f739-4040-94a0-b46286742dbe'],
                    'data': '2025-03-10',
                    'ora': '10:00',
                    'note': 'Short on the sides',
                    'idempotencyKey': '6f1c2f3e-booking-form-1'
                },
                request_only=True
            )
        ],
        responses={
            200: BookingCreateResponseSerializer,
            201: BookingCreateResponseSerializer,
            400: OpenApiResponse(description="Invalid data"),
            404: OpenApiResponse(description="Barber, service or customer not found"),
            409: OpenApiResponse(description="Slot no longer available"),
            503: OpenApiResponse(description="Booking store temporarily unavailable")
        },
        tags=['Bookings - Customer']
    )
    def create(self, request):
        """Create a booking for the requesting user"""
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking_request = serializer.to_booking_request(
            customer_id=request.user.id,
            idempotency_key=request.headers.get('Idempotency-Key'),
        )
        result = self.get_booking_service().create_booking(booking_request)

        if result.replayed:
            return Response({
                'success': True,
                'bookingId': str(result.booking.id),
                'message': BOOKING['replayed']['message'],
                'warnings': [],
                'replayed': True,
            }, status=status.HTTP_200_OK)

        return Response({
            'success': True,
            'bookingId': str(result.booking.id),
            'message': BOOKING['created']['message'],
            'warnings': result.notification_warnings,
            'replayed': False,
        }, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Cancel booking",
        description="Delete a booking. Allowed for the customer who made it and for admins.",
        responses={
            200: OpenApiResponse(description="Booking cancelled"),
            403: OpenApiResponse(description="Not the owner of the booking"),
            404: OpenApiResponse(description="Booking not found")
        },
        tags=['Bookings - Customer']
    )
    def destroy(self, request, pk=None):
        """Cancel (delete) a booking"""
        self.get_booking_service().cancel_booking(
            requester_id=request.user.id,
            requester_role=request.user.role,
            booking_id=pk,
        )
        return Response({'success': True, 'message': BOOKING['cancelled']['message']})

    @extend_schema(
        summary="Complete booking",
        description="Mark a pending or confirmed booking as completed (its barber or an admin)",
        request=None,
        responses={
            200: OpenApiResponse(description="Booking completed"),
            400: OpenApiResponse(description="Booking cannot be completed"),
            403: OpenApiResponse(description="Forbidden"),
            404: OpenApiResponse(description="Booking not found")
        },
        tags=['Bookings - Barber']
    )
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Complete a booking"""
        booking = self.get_booking_service().complete_booking(request.user, pk)
        return Response({
            'success': True,
            'status': booking.status,
            'message': BOOKING['completed']['message'],
        })

    @extend_schema(
        summary="My bookings",
        description="Get the requesting customer's bookings",
        parameters=[
            OpenApiParameter('status', str, description='Filter by status'),
        ],
        responses={200: BookingSerializer(many=True)},
        tags=['Bookings - Customer']
    )
    @action(detail=False, methods=['get'])
    def my(self, request):
        """Get the user's bookings"""
        bookings = self.filter_queryset(self.get_queryset())

        page = self.paginate_queryset(bookings)
        if page is not None:
            serializer = BookingSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = BookingSerializer(bookings, many=True)
        return Response(serializer.data)
