"""
Unit tests for car inventory operations. Focus on service-layer behavior:
creation uploads the image first and stores its URL; updates are partial;
deletes are unconditional.
"""

import pytest

from carrental.exceptions import CarNotFoundError, ValidationError
from conftest import day

FORM = {
    "brand": "Toyota",
    "model": "Corolla",
    "price_per_day": "55",
    "fuel_type": "diesel",
    "seating_capacity": "5",
}


def test_create_car_uploads_image_and_stores_url(services, image_storage):
    car = services.cars.create_car(FORM, b"\x89PNG...", "my car.png", "image/png")

    assert image_storage.uploads[0]["folder"] == "car-images"
    assert image_storage.uploads[0]["filename"] == "my_car.png"
    assert car["image_url"] == "https://media.test/car-images/my_car.png"
    assert car["price_per_day"] == 55.0
    assert car["fuel_type"] == "DIESEL"
    assert car["status"] == "AVAILABLE"

    stored = services.store.get_car(car["_id"])
    assert stored["brand"] == "Toyota"
    assert stored["image_url"] == car["image_url"]


def test_create_car_requires_image(services, image_storage):
    with pytest.raises(ValidationError) as exc:
        services.cars.create_car(FORM, None)
    assert "image" in exc.value.message
    assert not image_storage.uploads


def test_create_car_rejects_other_file_types(services, image_storage):
    with pytest.raises(ValidationError):
        services.cars.create_car(FORM, b"GIF89a", "car.gif", "image/gif")
    assert not image_storage.uploads


@pytest.mark.parametrize("missing", ["brand", "model", "price_per_day", "seating_capacity"])
def test_create_car_missing_required_field_does_not_upload(services, image_storage, missing):
    form = {k: v for k, v in FORM.items() if k != missing}
    with pytest.raises(ValidationError) as exc:
        services.cars.create_car(form, b"\xff\xd8", "car.jpg", "image/jpeg")
    assert exc.value.errors[0]["field"] == missing
    assert not image_storage.uploads
    assert services.store.list_cars() == []


def test_create_car_rejects_non_positive_price(services):
    with pytest.raises(ValidationError):
        services.cars.create_car({**FORM, "price_per_day": "0"}, b"\xff\xd8", "car.jpg", "image/jpeg")


def test_update_car_is_partial(services, car):
    updated = services.cars.update_car(car["_id"], {"price_per_day": 70, "status": "not_available"})
    assert updated["price_per_day"] == 70
    assert updated["status"] == "NOT_AVAILABLE"
    assert updated["brand"] == car["brand"]
    assert updated["image_url"] == car["image_url"]


def test_update_car_ignores_image_url(services, car):
    updated = services.cars.update_car(car["_id"], {"image_url": "https://evil.test/x.png"})
    assert updated["image_url"] == car["image_url"]


def test_update_car_not_found(services):
    with pytest.raises(CarNotFoundError):
        services.cars.update_car("65f0c0ffee0000000000abcd", {"price_per_day": 70})


def test_get_car_not_found(services):
    with pytest.raises(CarNotFoundError):
        services.cars.get_car("65f0c0ffee0000000000abcd")


def test_delete_car(services, car):
    services.cars.delete_car(car["_id"])
    assert services.store.get_car(car["_id"]) is None


def test_delete_car_not_found(services):
    with pytest.raises(CarNotFoundError):
        services.cars.delete_car("65f0c0ffee0000000000abcd")


def test_delete_car_with_rentals_leaves_orphaned_reference(services, customer, car):
    """Car deletion does not check rentals; listings then show the car as None."""
    services.rentals.create_rental(customer, {"car_id": car["_id"], "start_date": day(1), "end_date": day(2)})
    services.cars.delete_car(car["_id"])

    listed = services.rentals.list_rentals(customer)
    assert listed[0]["car_id"] == car["_id"]
    assert listed[0]["car"] is None
