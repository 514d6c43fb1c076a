"""
User-friendly messages for API responses.

These messages are designed to be:
- Simple and jargon-free
- Actionable with clear next steps
- Helpful for non-technical users
"""

# ============================================
# Booking Messages
# ============================================

BOOKING = {
    'created': {
        'message': "Your booking is confirmed.",
    },
    'replayed': {
        'message': "This booking was already created.",
        'next_steps': "No need to submit it again.",
    },
    'cancelled': {
        'message': "Your booking has been cancelled.",
    },
    'completed': {
        'message': "The booking has been marked as completed.",
    },
    'barber_closed': {
        'error': "The barber is not working on this date.",
        'message': "This barber doesn't have working hours on the date you selected.",
        'next_steps': "Please choose a different date or another barber."
    },
    'outside_working_hours': {
        'error': "This time is outside the barber's working hours.",
        'message': "The selected services would not finish before the end of the shift.",
        'next_steps': "Please select a time from the available slots."
    },
    'slot_not_available': {
        'error': "This time slot is no longer available.",
        'message': "Someone may have just booked this slot.",
        'next_steps': "Please select a different time from the available slots."
    },
    'no_services': {
        'error': "Select at least one service.",
    },
    'duplicate_services': {
        'error': "Each service can only be selected once.",
    },
    'invalid_duration': {
        'error': "The requested duration must be a positive number of minutes.",
    },
    'duration_too_long': {
        'error': "The requested duration cannot be longer than a day.",
    },
    'idempotency_mismatch': {
        'error': "This request key was already used for a different booking.",
        'next_steps': "Send a new key for a new booking."
    },
    'past_date': {
        'error': "Date cannot be in the past.",
    },
    'cannot_cancel': {
        'error': "You can only cancel your own bookings.",
        'next_steps': "If you have concerns, please contact the barbershop directly."
    },
    'cannot_complete': {
        'error': "Only pending or confirmed bookings can be completed.",
    },
    'store_unavailable': {
        'error': "We couldn't save your booking right now.",
        'next_steps': "Please try again in a moment."
    },
}

# ============================================
# Notification Messages
# ============================================

NOTIFICATION = {
    'channel_failed': "We couldn't send the {channel} notification for this booking.",
}
