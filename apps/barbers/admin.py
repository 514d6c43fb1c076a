from django.contrib import admin
from .models import Barber


@admin.register(Barber)
class BarberAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'created_at']
    search_fields = ['user__email', 'user__first_name', 'user__last_name']
    list_filter = ['is_active']
