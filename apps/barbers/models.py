"""
Barber models
"""
from django.conf import settings
from django.db import models
from apps.core.models import BaseModel


class Barber(BaseModel):
    """
    Barber profile - a user who takes appointments
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='barber_profile'
    )

    # Profile
    bio = models.TextField(blank=True)
    specialties = models.JSONField(default=list, blank=True)

    # Status
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'barbers'
        verbose_name = 'Barber'
        verbose_name_plural = 'Barbers'
        ordering = ['user__first_name', 'user__last_name']

    def __str__(self):
        return self.name

    @property
    def name(self):
        return self.user.full_name
