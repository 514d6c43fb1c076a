"""
Custom permissions for the booking API
"""
from rest_framework import permissions


class IsBarberOrAdmin(permissions.BasePermission):
    """Permission for actions that both barbers and admins can perform"""
    message = "Only barbers or administrators can perform this action"

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            (request.user.is_barber() or request.user.is_admin())
        )
