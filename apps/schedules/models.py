"""
Working hours and closure models
"""
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from apps.core.models import BaseModel
from apps.core.utils.constants import DAYS_OF_WEEK


class WorkingHours(BaseModel):
    """
    One working window of a barber on a weekday.
    A barber may have several windows on the same day (e.g. a lunch break).
    """
    barber = models.ForeignKey(
        'barbers.Barber',
        on_delete=models.CASCADE,
        related_name='working_hours'
    )

    # 0 = Sunday ... 6 = Saturday
    weekday = models.PositiveSmallIntegerField(choices=DAYS_OF_WEEK)
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta:
        db_table = 'working_hours'
        verbose_name = 'Working Hours'
        verbose_name_plural = 'Working Hours'
        ordering = ['weekday', 'start_time']
        indexes = [
            models.Index(fields=['barber', 'weekday'], name='working_hours_barber_day_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                check=Q(start_time__lt=F('end_time')),
                name='working_hours_start_before_end',
            ),
        ]

    def __str__(self):
        return f"{self.barber} - {self.get_weekday_display()} {self.start_time:%H:%M}-{self.end_time:%H:%M}"

    def clean(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValidationError({'end_time': 'End time must be after start time.'})


class Closure(BaseModel):
    """
    A date on which a barber (or the whole shop, when barber is empty) takes no bookings
    """
    barber = models.ForeignKey(
        'barbers.Barber',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='closures',
        help_text='Leave empty to close the whole shop'
    )
    date = models.DateField(db_index=True)
    reason = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'closures'
        verbose_name = 'Closure'
        verbose_name_plural = 'Closures'
        ordering = ['date']

    def __str__(self):
        who = self.barber if self.barber_id else 'Shop'
        return f"{who} closed on {self.date}"
