# carrental/utils/constants.py

"""
Global constants for roles, statuses, and allowed types.
These constants are imported by models, services and controllers.
"""

ONE_DAY_MS = 24 * 60 * 60 * 1000


class Role:
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


class RentalStatus:
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class PaymentStatus:
    PAID = "PAID"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"


class CarStatus:
    AVAILABLE = "AVAILABLE"
    NOT_AVAILABLE = "NOT_AVAILABLE"


class FuelType:
    DIESEL = "DIESEL"
    GASOIL = "GASOIL"


# Rentals in these states hold the car for their date range
BLOCKING_RENTAL_STATES = (RentalStatus.PENDING, RentalStatus.ACCEPTED)
TERMINAL_RENTAL_STATES = (RentalStatus.ACCEPTED, RentalStatus.REJECTED)

# --- Uploads ---
ALLOWED_IMAGE_MIMES = {"image/jpeg", "image/png"}
