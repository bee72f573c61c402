from flask import Blueprint, g, jsonify

from ..services.policy import Action
from ..utils.decorators import login_required, permission_required
from . import get_services, json_body

bp = Blueprint("rentals", __name__, url_prefix="/api/rentals")


@bp.post("")
@login_required
def create_rental():
    """Book a car for the current user; the rental starts out PENDING."""
    rental = get_services().rentals.create_rental(g.current_user, json_body())
    return jsonify(rental), 201


@bp.get("")
@login_required
def list_rentals():
    """Admins get all rentals, customers only their own."""
    return jsonify(get_services().rentals.list_rentals(g.current_user))


@bp.get("/<rental_id>")
@login_required
def get_rental(rental_id):
    return jsonify(get_services().rentals.get_rental(g.current_user, rental_id))


@bp.get("/user/<user_id>")
@login_required
def rentals_for_user(user_id):
    return jsonify(get_services().rentals.rentals_for_user(g.current_user, user_id))


@bp.put("/accept/<rental_id>")
@login_required
@permission_required(Action.RENTAL_SET_STATUS)
def accept_rental(rental_id):
    return jsonify(get_services().rentals.accept(rental_id))


@bp.put("/reject/<rental_id>")
@login_required
@permission_required(Action.RENTAL_SET_STATUS)
def reject_rental(rental_id):
    return jsonify(get_services().rentals.reject(rental_id))


@bp.delete("/<rental_id>")
@login_required
@permission_required(Action.RENTAL_DELETE)
def delete_rental(rental_id):
    get_services().rentals.delete_rental(rental_id)
    return jsonify({"message": "Rental deleted successfully"})
