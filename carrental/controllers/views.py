from flask import Blueprint, jsonify

bp = Blueprint("views", __name__)


@bp.get("/")
def home():
    return jsonify({"message": "Car rental API is running"})
