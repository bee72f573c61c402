"""Rental-related service layer: booking, listing and approval."""

import logging

from carrental.exceptions import (
    BookingConflictError,
    CarNotFoundError,
    InvalidStatusTransitionError,
    RentalNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from carrental.models.schemas import RentalCreate, validate
from carrental.services.common import attach_refs
from carrental.services.policy import Action, authorize, is_allowed
from carrental.utils.constants import (
    BLOCKING_RENTAL_STATES,
    TERMINAL_RENTAL_STATES,
    PaymentStatus,
    RentalStatus,
)
from carrental.utils.dates import now_ms, ranges_overlap, rental_days

logger = logging.getLogger(__name__)


class RentalService:
    """
    Create, list, look up and approve/reject rentals.

    Status lifecycle: PENDING -> ACCEPTED | REJECTED. Both outcomes are terminal;
    repeating the current outcome is a no-op, switching to the other one fails.
    """

    def __init__(self, store):
        self.store = store

    def create_rental(self, caller: dict, payload: dict) -> dict:
        """
        Book a car for the inclusive range [start_date, end_date].

        Price is fixed at creation: rental_days * car.price_per_day, where a
        same-day booking counts as one day. Bookings that overlap a PENDING or
        ACCEPTED rental of the same car are refused. The overlap check and the
        insert are separate operations, so two concurrent requests can still
        both succeed.
        """
        authorize(caller, Action.RENTAL_CREATE)
        data = validate(RentalCreate, payload)
        start, end = data["start_date"], data["end_date"]
        if end < start:
            raise ValidationError("Error: end date must not be before start date")

        car = self.store.get_car(data["car_id"])
        if not car:
            raise CarNotFoundError()

        days = rental_days(start, end)
        total = days * car["price_per_day"]

        for r in self.store.rentals_for_car(car["_id"], BLOCKING_RENTAL_STATES):
            if ranges_overlap(start, end, r["start_date"], r["end_date"]):
                raise BookingConflictError()

        doc = {
            "user_id": str(caller["_id"]),
            "car_id": car["_id"],
            "start_date": start,
            "end_date": end,
            "total_price": total,
            "rental_status": RentalStatus.PENDING,
            "payment_status": PaymentStatus.PENDING,
            "created_at": now_ms(),
        }
        rid = self.store.create_rental(doc)
        logger.info("Rental %s: car %s for user %s, %s -> %s (%d days, total %s)",
                    rid, car["_id"], caller["_id"], start, end, days, total)
        return {**doc, "_id": rid}

    def list_rentals(self, caller: dict) -> list:
        """Admins see every rental with user and car; customers see their own with car only."""
        authorize(caller, Action.RENTAL_LIST)
        if is_allowed(caller, Action.RENTAL_LIST_ALL):
            return attach_refs(self.store.list_rentals(), self.store, with_user=True)
        return attach_refs(self.store.list_rentals(user_id=caller["_id"]), self.store)

    def get_rental(self, caller: dict, rental_id: str) -> dict:
        rental = self.store.get_rental(rental_id)
        if not rental:
            raise RentalNotFoundError()
        authorize(caller, Action.RENTAL_READ, rental)
        return rental

    def rentals_for_user(self, caller: dict, user_id: str) -> list:
        user = self.store.get_user(user_id)
        if not user:
            raise UserNotFoundError()
        authorize(caller, Action.RENTAL_READ, {"user_id": user["_id"]})
        return attach_refs(self.store.list_rentals(user_id=user["_id"]), self.store)

    def set_status(self, rental_id: str, status: str) -> dict:
        if status not in TERMINAL_RENTAL_STATES:
            raise ValidationError(f"Error: invalid rental status {status!r}")

        rental = self.store.get_rental(rental_id)
        if not rental:
            raise RentalNotFoundError()

        current = rental.get("rental_status", RentalStatus.PENDING)
        if current == status:
            return rental
        if current in TERMINAL_RENTAL_STATES:
            raise InvalidStatusTransitionError(f"Error: rental is already {current}")

        updated = self.store.transition_rental(rental_id, RentalStatus.PENDING, {"rental_status": status})
        if updated is None:
            # Another request moved it out of PENDING in the meantime.
            latest = self.store.get_rental(rental_id)
            if not latest:
                raise RentalNotFoundError()
            if latest.get("rental_status") == status:
                return latest
            raise InvalidStatusTransitionError(f"Error: rental is already {latest.get('rental_status')}")

        logger.info("Rental %s: %s -> %s", rental_id, current, status)
        return updated

    def accept(self, rental_id: str) -> dict:
        return self.set_status(rental_id, RentalStatus.ACCEPTED)

    def reject(self, rental_id: str) -> dict:
        return self.set_status(rental_id, RentalStatus.REJECTED)

    def delete_rental(self, rental_id: str) -> None:
        if not self.store.delete_rental(rental_id):
            raise RentalNotFoundError()
        logger.info("Deleted rental %s", rental_id)
