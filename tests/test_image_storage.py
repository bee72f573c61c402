import httpx
import pytest

from carrental.exceptions import ImageUploadError
from carrental.services.image_storage import ImageStorage

UPLOAD_URL = "https://media.test/v1_1/demo/image/upload"


def _storage(handler, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ImageStorage(UPLOAD_URL, client=client, **kwargs)


def test_upload_returns_secure_url_and_sends_folder():
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = request.read()
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"secure_url": "https://cdn.test/car-images/abc.jpg"})

    url = _storage(handler, upload_preset="cars").upload(b"\xff\xd8", "abc.jpg", "image/jpeg", "car-images")

    assert url == "https://cdn.test/car-images/abc.jpg"
    assert seen["url"] == UPLOAD_URL
    assert b'name="folder"' in seen["body"]
    assert b"car-images" in seen["body"]
    assert b'name="upload_preset"' in seen["body"]
    assert b'filename="abc.jpg"' in seen["body"]


def test_upload_error_status_raises():
    storage = _storage(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(ImageUploadError):
        storage.upload(b"\xff\xd8", "abc.jpg", "image/jpeg", "car-images")


def test_upload_network_error_raises():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(ImageUploadError):
        _storage(handler).upload(b"\xff\xd8", "abc.jpg", "image/jpeg", "car-images")


def test_upload_response_without_url_raises():
    storage = _storage(lambda request: httpx.Response(200, json={"public_id": "abc"}))
    with pytest.raises(ImageUploadError):
        storage.upload(b"\xff\xd8", "abc.jpg", "image/jpeg", "car-images")


def test_unconfigured_storage_raises():
    with pytest.raises(ImageUploadError):
        ImageStorage("").upload(b"\xff\xd8", "abc.jpg", "image/jpeg", "car-images")


def test_upload_failure_over_http_is_502(client, admin, auth, app):
    import io

    app.extensions["carrental"].cars.image_storage = _storage(lambda request: httpx.Response(503))
    r = client.post("/api/cars", data={
        "brand": "Fiat", "model": "Panda", "price_per_day": "30", "seating_capacity": "4",
        "image": (io.BytesIO(b"\xff\xd8"), "panda.jpg", "image/jpeg"),
    }, headers=auth(admin), content_type="multipart/form-data")
    assert r.status_code == 502
    assert r.get_json()["message"] == "Error: image upload failed"
