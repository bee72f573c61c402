"""
seeds.py
--------
Create the admin account and a few demo cars.

Registration through the API always creates CUSTOMER accounts, so this
script is how the first ADMIN gets into the database.

Usage:
    $ ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=Admin123 python seeds.py
"""
import os

from carrental import create_app
from carrental.models.store import Store
from carrental.utils.constants import CarStatus, FuelType, Role
from carrental.utils.security import generate_hash

DEMO_CARS = [
    {"brand": "Toyota", "model": "Corolla", "price_per_day": 45, "fuel_type": FuelType.GASOIL,
     "seating_capacity": 5, "image_url": "https://placehold.co/600x400?text=Corolla"},
    {"brand": "Honda", "model": "Civic", "price_per_day": 50, "fuel_type": FuelType.GASOIL,
     "seating_capacity": 5, "image_url": "https://placehold.co/600x400?text=Civic"},
    {"brand": "Peugeot", "model": "Partner", "price_per_day": 60, "fuel_type": FuelType.DIESEL,
     "seating_capacity": 7, "image_url": "https://placehold.co/600x400?text=Partner"},
]


def ensure_admin(store: Store, email: str, password: str, name: str = "Administrator"):
    """
    Ensure an ADMIN with `email` exists in the store.
    - If exists: reset password hash and role (idempotent).
    - If not:   create it.
    """
    email = email.strip().lower()
    u = store.find_user_by_email(email)
    if u:
        store.update_user(u["_id"], {"password": generate_hash(password), "role": Role.ADMIN})
        return u["_id"]
    return store.create_user({
        "name": name,
        "email": email,
        "password": generate_hash(password),
        "phone": "0000000000",
        "address": "Head office",
        "role": Role.ADMIN,
    })


def main():
    app = create_app()
    store = app.extensions["carrental"].store

    email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    password = os.getenv("ADMIN_PASSWORD", "Admin123")
    ensure_admin(store, email, password)

    # Demo cars are created only if the inventory is empty
    if not store.list_cars():
        for car in DEMO_CARS:
            store.create_car({**car, "status": CarStatus.AVAILABLE})

    print("Seed complete.")
    print(f"Admin login: {email} / {password}")


if __name__ == "__main__":
    main()
