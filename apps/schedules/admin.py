from django.contrib import admin
from .models import WorkingHours, Closure


@admin.register(WorkingHours)
class WorkingHoursAdmin(admin.ModelAdmin):
    list_display = ['barber', 'weekday', 'start_time', 'end_time']
    search_fields = ['barber__user__first_name', 'barber__user__last_name']
    list_filter = ['weekday']


@admin.register(Closure)
class ClosureAdmin(admin.ModelAdmin):
    list_display = ['barber', 'date', 'reason', 'created_at']
    search_fields = ['reason', 'barber__user__first_name', 'barber__user__last_name']
    list_filter = ['date', 'barber']
    date_hierarchy = 'date'
