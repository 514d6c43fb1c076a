"""
User model for customers, barbers and shop administrators
"""
import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from apps.core.utils.constants import (
    USER_ROLES,
    USER_ROLE_CUSTOMER,
    USER_ROLE_BARBER,
    USER_ROLE_ADMIN,
)
from apps.core.validators import validate_phone_number
from .managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model.
    Identity and sessions are owned by the upstream auth layer; this table
    only stores who the user is and which role they hold.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Basic fields
    email = models.EmailField(unique=True, db_index=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=20, blank=True, validators=[validate_phone_number])

    # User role
    role = models.CharField(
        max_length=20,
        choices=USER_ROLES,
        default=USER_ROLE_CUSTOMER
    )

    # Status
    is_active = models.BooleanField(default=True)

    # Admin fields
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    @property
    def full_name(self):
        """Return user's full name"""
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def is_barber(self):
        return self.role == USER_ROLE_BARBER

    def is_admin(self):
        return self.role == USER_ROLE_ADMIN
