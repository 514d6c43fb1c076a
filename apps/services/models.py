"""
Service model
"""
from django.db import models
from apps.core.models import BaseModel
from apps.core.utils.constants import SERVICE_CATEGORIES, SERVICE_CATEGORY_HAIRCUT
from apps.core.validators import validate_service_price, validate_service_duration


class Service(BaseModel):
    """
    Service offered by the barbershop
    """
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # Pricing
    price = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        validators=[validate_service_price]
    )

    # Duration
    duration_minutes = models.PositiveIntegerField(validators=[validate_service_duration])

    # Category
    category = models.CharField(
        max_length=20,
        choices=SERVICE_CATEGORIES,
        default=SERVICE_CATEGORY_HAIRCUT
    )

    # Status
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'services'
        verbose_name = 'Service'
        verbose_name_plural = 'Services'
        ordering = ['category', 'name']
        indexes = [
            models.Index(fields=['category', 'is_active'], name='services_category_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.duration_minutes} min)"
