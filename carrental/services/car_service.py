from __future__ import annotations

import logging

from werkzeug.utils import secure_filename

from carrental.exceptions import CarNotFoundError, ValidationError
from carrental.models.schemas import CarCreate, CarUpdate, validate
from carrental.utils.constants import ALLOWED_IMAGE_MIMES

logger = logging.getLogger(__name__)


class CarService:
    """Car catalogue: list, create (with image upload), update, delete."""

    def __init__(self, store, image_storage, settings):
        self.store = store
        self.image_storage = image_storage
        self.settings = settings

    def list_cars(self) -> list:
        return self.store.list_cars()

    def get_car(self, car_id: str) -> dict:
        car = self.store.get_car(car_id)
        if car is None:
            raise CarNotFoundError()
        return car

    def create_car(self, metadata: dict, image: bytes | None, filename: str = "",
                   mimetype: str = "") -> dict:
        """
        Upload the image, then persist the car with the returned URL.
        Metadata is validated first so a bad form never leaves an orphaned upload.
        """
        if not image:
            raise ValidationError("Error: no image uploaded")
        if mimetype not in ALLOWED_IMAGE_MIMES:
            raise ValidationError("Error: this file type is not allowed")

        data = validate(CarCreate, metadata)
        url = self.image_storage.upload(
            image,
            secure_filename(filename or "") or "car-image",
            mimetype,
            self.settings.image_folder,
        )

        doc = {**data, "image_url": url}
        cid = self.store.create_car(doc)
        logger.info("Created car %s (%s %s)", cid, doc["brand"], doc["model"])
        return {**doc, "_id": cid}

    def update_car(self, car_id: str, patch: dict) -> dict:
        car = self.get_car(car_id)
        updates = validate(CarUpdate, patch, partial=True)
        if not updates:
            return car
        updated = self.store.update_car(car_id, updates)
        if updated is None:
            raise CarNotFoundError()
        return updated

    def delete_car(self, car_id: str) -> None:
        """
        Delete unconditionally. Rentals that reference the car keep its id;
        joined listings then show the car as null.
        """
        if not self.store.delete_car(car_id):
            raise CarNotFoundError()
        logger.info("Deleted car %s", car_id)
