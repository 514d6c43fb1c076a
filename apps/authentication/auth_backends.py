"""
Authentication classes for requests forwarded by the auth gateway
"""
import uuid

from rest_framework import authentication

from .models import User


class TrustedHeaderAuthentication(authentication.BaseAuthentication):
    """
    Authenticate using the X-User-ID header.

    The gateway in front of the API has already verified the session and
    injects the user's id; this class only resolves it to an active user.
    """

    header = 'HTTP_X_USER_ID'

    def authenticate(self, request):
        raw_user_id = request.META.get(self.header)

        if not raw_user_id:
            return None

        try:
            user_id = uuid.UUID(raw_user_id)
        except ValueError:
            return None

        try:
            user = User.objects.get(id=user_id, is_active=True)
            return (user, None)
        except User.DoesNotExist:
            return None

    def authenticate_header(self, request):
        return 'X-User-ID'
