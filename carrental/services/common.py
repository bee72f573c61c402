"""Shared service helpers."""
from typing import Optional


def strip_password(user: Optional[dict]) -> Optional[dict]:
    """Return a copy of the user record without its password hash."""
    if not user:
        return None
    return {k: v for k, v in user.items() if k != "password"}


def normalize_email(value) -> str:
    """Lower-case and trim an email; '' for anything that is not a string."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def attach_refs(rentals: list, store, with_user: bool = False) -> list:
    """
    Join car (and optionally user) records onto rental dicts by reference id.
    A reference to a deleted record is rendered as None.
    """
    cars = store.get_cars(r.get("car_id") for r in rentals)
    users = store.get_users(r.get("user_id") for r in rentals) if with_user else {}
    out = []
    for r in rentals:
        item = dict(r)
        item["car"] = cars.get(r.get("car_id"))
        if with_user:
            item["user"] = strip_password(users.get(r.get("user_id")))
        out.append(item)
    return out
