"""
Admin-only routes must answer 403 to customers before looking at the body,
and 401 to anonymous callers.
"""

import pytest

ADMIN_ROUTES = [
    ("post", "/api/cars"),
    ("put", "/api/cars/{car}"),
    ("delete", "/api/cars/{car}"),
    ("put", "/api/rentals/accept/{rental}"),
    ("put", "/api/rentals/reject/{rental}"),
    ("delete", "/api/rentals/{rental}"),
    ("delete", "/api/users/{user}"),
    ("get", "/api/users"),
]


@pytest.fixture
def ids(services, customer, car):
    rental = services.rentals.create_rental(customer, {
        "car_id": car["_id"], "start_date": "2030-01-01", "end_date": "2030-01-02",
    })
    return {"car": car["_id"], "rental": rental["_id"], "user": customer["_id"]}


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
@pytest.mark.parametrize("body", [None, {"garbage": True}, {"price_per_day": -1}])
def test_customer_is_forbidden(client, customer, auth, ids, method, path, body):
    r = getattr(client, method)(path.format(**ids), json=body, headers=auth(customer))
    assert r.status_code == 403
    assert r.get_json()["message"]


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_anonymous_is_unauthenticated(client, ids, method, path):
    r = getattr(client, method)(path.format(**ids))
    assert r.status_code == 401


def test_forbidden_calls_change_nothing(client, store, customer, auth, ids):
    client.delete(f"/api/cars/{ids['car']}", headers=auth(customer))
    client.put(f"/api/rentals/accept/{ids['rental']}", headers=auth(customer))
    assert store.get_car(ids["car"]) is not None
    assert store.get_rental(ids["rental"])["rental_status"] == "PENDING"


def test_public_car_routes_need_no_token(client, car):
    assert client.get("/api/cars").status_code == 200
    assert client.get(f"/api/cars/{car['_id']}").status_code == 200
