from flask import Blueprint, g, jsonify

from ..services.policy import Action
from ..utils.decorators import login_required, permission_required
from . import get_services, json_body

bp = Blueprint("users", __name__, url_prefix="/api/users")


@bp.get("")
@login_required
@permission_required(Action.USER_LIST)
def list_users():
    return jsonify(get_services().users.list_users())


@bp.get("/<user_id>")
@login_required
def get_user(user_id):
    return jsonify(get_services().users.get_user(g.current_user, user_id))


@bp.put("/<user_id>")
@login_required
def update_user(user_id):
    """Update a profile. Only admins can change `role`; others have it dropped."""
    return jsonify(get_services().users.update_user(g.current_user, user_id, json_body()))


@bp.delete("/<user_id>")
@login_required
@permission_required(Action.USER_DELETE)
def delete_user(user_id):
    get_services().users.delete_user(user_id)
    return jsonify({"message": "User deleted successfully"})
