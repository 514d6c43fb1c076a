from django.contrib import admin
from .models import Booking, BookingService


class BookingServiceInline(admin.TabularInline):
    model = BookingService
    extra = 0
    readonly_fields = ['price_at_booking', 'duration_minutes']


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['customer', 'barber', 'start_datetime', 'status', 'total_price', 'created_at']
    search_fields = ['customer__email', 'barber__user__first_name', 'barber__user__last_name']
    list_filter = ['status', 'start_datetime', 'created_at']
    date_hierarchy = 'start_datetime'
    inlines = [BookingServiceInline]
