from flask import Blueprint, jsonify, request

from ..services.policy import Action
from ..utils.decorators import login_required, permission_required
from . import get_services, json_body

bp = Blueprint("cars", __name__, url_prefix="/api/cars")


@bp.get("")
def list_cars():
    """Public inventory listing, no pagination."""
    return jsonify(get_services().cars.list_cars())


@bp.get("/<car_id>")
def get_car(car_id):
    return jsonify(get_services().cars.get_car(car_id))


@bp.post("")
@login_required
@permission_required(Action.CAR_CREATE)
def create_car():
    """Multipart form: car fields plus an `image` file part."""
    image = request.files.get("image")
    data, filename, mimetype = None, "", ""
    if image is not None and image.filename:
        data = image.read()
        filename = image.filename
        mimetype = image.mimetype

    car = get_services().cars.create_car(request.form.to_dict(), data, filename, mimetype)
    return jsonify(car), 201


@bp.put("/<car_id>")
@login_required
@permission_required(Action.CAR_UPDATE)
def update_car(car_id):
    return jsonify(get_services().cars.update_car(car_id, json_body()))


@bp.delete("/<car_id>")
@login_required
@permission_required(Action.CAR_DELETE)
def delete_car(car_id):
    get_services().cars.delete_car(car_id)
    return jsonify({"message": "Car deleted successfully"})
