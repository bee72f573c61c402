from flask import Blueprint, jsonify

from . import get_services, json_body

bp = Blueprint("auth", __name__, url_prefix="/api/users")


@bp.post("/register")
def register():
    """Create a CUSTOMER account; a `role` in the body is ignored."""
    user = get_services().users.register(json_body())
    return jsonify({"message": "user registered successfully", "user": user}), 201


@bp.post("/login")
def login():
    body = json_body()
    result = get_services().users.login(body.get("email"), body.get("password"))
    return jsonify(result)
