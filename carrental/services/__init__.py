from .car_service import CarService
from .image_storage import ImageStorage
from .rental_service import RentalService
from .user_service import UserService


class Services:
    """Per-app bundle of the configured store and the services built on it."""

    def __init__(self, settings, store, image_storage):
        self.settings = settings
        self.store = store
        self.image_storage = image_storage
        self.users = UserService(store, settings)
        self.cars = CarService(store, image_storage, settings)
        self.rentals = RentalService(store)


__all__ = [
    "Services",
    "RentalService",
    "CarService",
    "UserService",
    "ImageStorage",
]
