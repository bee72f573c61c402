from flask import current_app, request

from carrental.exceptions import ValidationError


def get_services():
    """The Services bundle created by create_app()."""
    return current_app.extensions["carrental"]


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Error: request body must be a JSON object")
    return data
