"""
External media host client for car images.

Uploads go to an unsigned upload endpoint (Cloudinary-style): the file is
posted as multipart form data together with the target folder and upload
preset, and the host answers with JSON carrying the public `secure_url`.
"""
import logging

import httpx

from carrental.exceptions import ImageUploadError

logger = logging.getLogger(__name__)


class ImageStorage:
    def __init__(self, upload_url: str, upload_preset: str = "", timeout: float = 30.0,
                 client: httpx.Client | None = None):
        self.upload_url = upload_url
        self.upload_preset = upload_preset
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings) -> "ImageStorage":
        return cls(settings.image_upload_url, settings.image_upload_preset, settings.http_timeout)

    def upload(self, data: bytes, filename: str, mimetype: str, folder: str) -> str:
        """Upload one image and return its public URL. Never retried."""
        if not self.upload_url:
            raise ImageUploadError("Error: image storage is not configured")

        form = {"folder": folder}
        if self.upload_preset:
            form["upload_preset"] = self.upload_preset
        files = {"file": (filename, data, mimetype)}

        logger.info("Uploading %s (%d bytes) to folder %r", filename, len(data), folder)
        try:
            if self._client is not None:
                response = self._client.post(self.upload_url, data=form, files=files,
                                             timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.upload_url, data=form, files=files)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Image upload rejected: %s - %s", e.response.status_code, e.response.text)
            raise ImageUploadError() from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Image upload failed: %s", e)
            raise ImageUploadError() from e

        url = None
        if isinstance(payload, dict):
            url = payload.get("secure_url") or payload.get("url")
        if not url:
            logger.error("Image upload response has no URL: %r", payload)
            raise ImageUploadError("Error: image storage returned no URL")
        return url
