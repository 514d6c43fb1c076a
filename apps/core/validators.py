"""
Custom validators
"""
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _
import re

from apps.core.utils.constants import (
    SERVICE_MIN_DURATION_MINUTES,
    SERVICE_MAX_DURATION_MINUTES,
    SERVICE_DURATION_STEP_MINUTES,
)

PRICE_MIN = Decimal('0.50')
PRICE_MAX = Decimal('1000')
PRICE_STEP = Decimal('0.50')


def validate_phone_number(value):
    """
    Validate phone number format
    """
    phone_regex = re.compile(r'^\+?\d{6,15}$')
    if not phone_regex.match(re.sub(r'[\s\-()]', '', value)):
        raise ValidationError(
            _('Phone number must be entered in the format: "+39123456789". Up to 15 digits allowed.')
        )


def validate_service_duration(value):
    """
    Validate service duration in minutes: a multiple of 5 between 15 and 240
    """
    if value is None or value < SERVICE_MIN_DURATION_MINUTES or value > SERVICE_MAX_DURATION_MINUTES:
        raise ValidationError(
            _('Duration must be between %(min)s and %(max)s minutes.'),
            params={'min': SERVICE_MIN_DURATION_MINUTES, 'max': SERVICE_MAX_DURATION_MINUTES},
        )
    if value % SERVICE_DURATION_STEP_MINUTES:
        raise ValidationError(
            _('Duration must be a multiple of %(step)s minutes.'),
            params={'step': SERVICE_DURATION_STEP_MINUTES},
        )


def validate_service_price(value):
    """
    Validate service price: a multiple of 0.50 between 0.50 and 1000
    """
    try:
        price = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValidationError(_('Enter a valid price.'))

    if price < PRICE_MIN or price > PRICE_MAX:
        raise ValidationError(_('Price must be between 0.50 and 1000.'))
    if price % PRICE_STEP:
        raise ValidationError(_('Price must be a multiple of 0.50.'))
