"""
Configuration settings for the application.

Settings are read once from the environment (and an optional .env file) and
then handed explicitly to the app factory, the store and the services.
"""
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_SECRET = "dev-secret-change-me"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "car_rental"
    secret_key: str = DEFAULT_SECRET
    token_max_age: int = 24 * 60 * 60  # seconds
    image_upload_url: str = ""
    image_upload_preset: str = ""
    image_folder: str = "car-images"
    http_timeout: float = 30.0  # seconds
    db_timeout_ms: int = 5000
    db_read_retries: int = 2
    max_image_bytes: int = 10 * 1024 * 1024
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        settings = cls(
            mongodb_uri=os.getenv("MONGODB_URI", cls.mongodb_uri).strip('"').strip("'"),
            mongodb_db=os.getenv("MONGODB_DB", cls.mongodb_db),
            secret_key=os.getenv("SECRET_KEY", cls.secret_key),
            token_max_age=_int_env("TOKEN_MAX_AGE", cls.token_max_age),
            image_upload_url=os.getenv("IMAGE_UPLOAD_URL", cls.image_upload_url),
            image_upload_preset=os.getenv("IMAGE_UPLOAD_PRESET", cls.image_upload_preset),
            image_folder=os.getenv("IMAGE_FOLDER", cls.image_folder),
            http_timeout=_float_env("HTTP_TIMEOUT", cls.http_timeout),
            db_timeout_ms=_int_env("DB_TIMEOUT_MS", cls.db_timeout_ms),
            db_read_retries=_int_env("DB_READ_RETRIES", cls.db_read_retries),
            max_image_bytes=_int_env("MAX_IMAGE_BYTES", cls.max_image_bytes),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
        if settings.secret_key == DEFAULT_SECRET:
            logger.warning("SECRET_KEY not set - using the development default")
        return settings
