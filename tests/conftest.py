import sys, pathlib

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import mongomock
import pytest

from carrental import create_app
from carrental.config import Settings
from carrental.models.store import Store
from carrental.utils.constants import ONE_DAY_MS, CarStatus, FuelType, Role
from carrental.utils.security import generate_hash, issue_token

SECRET = "test-secret"
PASSWORD = "Secret123"

# 2030-01-01T00:00:00Z
BASE_MS = 1893456000000


def day(n: int) -> int:
    """Epoch ms of midnight UTC, `n` days after 2030-01-01."""
    return BASE_MS + n * ONE_DAY_MS


class FakeImageStorage:
    """Records uploads instead of talking to the media host."""

    def __init__(self):
        self.uploads = []

    def upload(self, data, filename, mimetype, folder):
        self.uploads.append({"data": data, "filename": filename, "mimetype": mimetype, "folder": folder})
        return f"https://media.test/{folder}/{filename}"


@pytest.fixture
def settings():
    return Settings(secret_key=SECRET, mongodb_db="car_rental_test", log_level="WARNING")


@pytest.fixture
def store():
    """A fresh in-memory MongoDB per test."""
    st = Store(mongomock.MongoClient()["car_rental_test"], read_retries=0)
    st.ensure_indexes()
    return st


@pytest.fixture
def image_storage():
    return FakeImageStorage()


@pytest.fixture
def app(settings, store, image_storage):
    app = create_app(settings, store=store, image_storage=image_storage)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def services(app):
    return app.extensions["carrental"]


def _make_user(store, email, role=Role.CUSTOMER, name="Test User"):
    uid = store.create_user({
        "name": name,
        "email": email,
        "password": generate_hash(PASSWORD),
        "phone": "0612345678",
        "address": "1 Main Street",
        "role": role,
    })
    user = store.get_user(uid)
    user.pop("password")
    return user


@pytest.fixture
def admin(store):
    return _make_user(store, "admin@example.com", Role.ADMIN, name="Admin")


@pytest.fixture
def customer(store):
    return _make_user(store, "alice@example.com", name="Alice")


@pytest.fixture
def other_customer(store):
    return _make_user(store, "bob@example.com", name="Bob")


@pytest.fixture
def auth():
    """auth(user) -> headers carrying a valid bearer token for that user."""

    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user['_id'], SECRET)}"}

    return _headers


@pytest.fixture
def make_car(store):
    def _make(price_per_day=50, brand="Toyota", model="Corolla"):
        cid = store.create_car({
            "brand": brand,
            "model": model,
            "price_per_day": price_per_day,
            "fuel_type": FuelType.GASOIL,
            "status": CarStatus.AVAILABLE,
            "seating_capacity": 5,
            "image_url": "https://media.test/car-images/car.jpg",
        })
        return store.get_car(cid)

    return _make


@pytest.fixture
def car(make_car):
    return make_car()
