"""
Custom exceptions and exception handler

The booking engine raises these from its service layer; the DRF exception
handler turns them into ``{"success": false, "message": ...}`` bodies with
the status code each class declares.
"""
from rest_framework.views import exception_handler
from rest_framework.exceptions import APIException
from rest_framework import status


class ServiceUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Service temporarily unavailable, try again later.'
    default_code = 'service_unavailable'


class InvalidOperation(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid operation.'
    default_code = 'invalid_operation'


class ResourceConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource conflict.'
    default_code = 'resource_conflict'


class BookingValidationError(APIException):
    """Malformed or missing input (bad date, zero duration, empty service list)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid booking request.'
    default_code = 'invalid'


class NotFoundError(APIException):
    """A barber, service, customer or booking id does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'

    def __init__(self, resource='resource', detail=None):
        self.resource = resource
        super().__init__(detail or f'{resource.capitalize()} not found.')


class BookingPermissionError(APIException):
    """Cancellation attempted by someone who is neither the owner nor an admin."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to modify this booking.'
    default_code = 'permission_denied'


class SlotConflictError(ResourceConflict):
    """The requested interval is no longer free at write time."""
    default_detail = 'This time slot is no longer available. Please pick another time.'
    default_code = 'slot_conflict'


class InvalidBookingState(InvalidOperation):
    default_detail = 'This booking cannot change to the requested status.'


class TransientStoreError(ServiceUnavailable):
    """Store I/O failed before commit; the whole operation can be retried."""
    default_detail = 'The booking store is temporarily unavailable. Please try again.'


def custom_exception_handler(exc, context):
    """
    Custom exception handler that adds additional context
    """
    response = exception_handler(exc, context)

    if response is not None:
        detail = response.data.get('detail', str(exc)) if isinstance(response.data, dict) else str(exc)
        custom_response_data = {
            'success': False,
            'error': True,
            'message': str(detail),
            'code': getattr(exc, 'default_code', 'error'),
            'status_code': response.status_code,
        }

        if isinstance(exc, APIException):
            codes = exc.get_codes()
            if isinstance(codes, str):
                custom_response_data['code'] = codes

        # Add field errors if present
        if isinstance(response.data, (dict, list)) and (
            not isinstance(response.data, dict) or 'detail' not in response.data
        ):
            custom_response_data['message'] = 'Invalid request data.'
            custom_response_data['errors'] = response.data

        response.data = custom_response_data

    return response
