"""
Application-wide constants
"""

# User roles
USER_ROLE_CUSTOMER = 'customer'
USER_ROLE_BARBER = 'barber'
USER_ROLE_ADMIN = 'admin'

USER_ROLES = [
    (USER_ROLE_CUSTOMER, 'Customer'),
    (USER_ROLE_BARBER, 'Barber'),
    (USER_ROLE_ADMIN, 'Admin'),
]

# Booking statuses
BOOKING_STATUS_PENDING = 'pending'
BOOKING_STATUS_CONFIRMED = 'confirmed'
BOOKING_STATUS_COMPLETED = 'completed'
BOOKING_STATUS_CANCELLED = 'cancelled'

BOOKING_STATUSES = [
    (BOOKING_STATUS_PENDING, 'Pending'),
    (BOOKING_STATUS_CONFIRMED, 'Confirmed'),
    (BOOKING_STATUS_COMPLETED, 'Completed'),
    (BOOKING_STATUS_CANCELLED, 'Cancelled'),
]

# Statuses whose interval blocks the barber's calendar
OCCUPYING_BOOKING_STATUSES = (
    BOOKING_STATUS_PENDING,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_COMPLETED,
)

# Days of week, numbered from Sunday
DAYS_OF_WEEK = [
    (0, 'Sunday'),
    (1, 'Monday'),
    (2, 'Tuesday'),
    (3, 'Wednesday'),
    (4, 'Thursday'),
    (5, 'Friday'),
    (6, 'Saturday'),
]

# Service categories
SERVICE_CATEGORY_HAIRCUT = 'haircut'
SERVICE_CATEGORY_BEARD = 'beard'
SERVICE_CATEGORY_COMBO = 'combo'
SERVICE_CATEGORY_COLORING = 'coloring'
SERVICE_CATEGORY_TREATMENT = 'treatment'

SERVICE_CATEGORIES = [
    (SERVICE_CATEGORY_HAIRCUT, 'Haircut'),
    (SERVICE_CATEGORY_BEARD, 'Beard'),
    (SERVICE_CATEGORY_COMBO, 'Combo'),
    (SERVICE_CATEGORY_COLORING, 'Coloring'),
    (SERVICE_CATEGORY_TREATMENT, 'Treatment'),
]

# Service limits
SERVICE_MIN_DURATION_MINUTES = 15
SERVICE_MAX_DURATION_MINUTES = 240
SERVICE_DURATION_STEP_MINUTES = 5

# Longest appointment a single working day can hold
MAX_APPOINTMENT_MINUTES = 24 * 60
