import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import LOG_DATE_FORMAT, LOG_FORMAT, Settings
from .controllers.auth import bp as auth_bp
from .controllers.cars import bp as cars_bp
from .controllers.rentals import bp as rentals_bp
from .controllers.users import bp as users_bp
from .controllers.views import bp as views_bp
from .exceptions import AppError
from .models.store import Store
from .services import ImageStorage, Services

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def _configure_logging(level: str):
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _register_error_handlers(app: Flask):
    @app.errorhandler(AppError)
    def handle_app_error(e: AppError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return jsonify({"message": "Error: internal server error"}), 500


def create_app(settings: Settings | None = None, store: Store | None = None,
               image_storage: ImageStorage | None = None):
    """
    Build the Flask app. Settings, store and image storage are created from the
    environment unless passed in (tests pass their own).
    """
    settings = settings or Settings.from_env()
    _configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["MAX_CONTENT_LENGTH"] = settings.max_image_bytes
    app.json.sort_keys = False
    CORS(app, supports_credentials=True, methods=CORS_METHODS, allow_headers=CORS_HEADERS)

    store = store or Store.connect(settings)
    image_storage = image_storage or ImageStorage.from_settings(settings)
    app.extensions["carrental"] = Services(settings, store, image_storage)

    app.register_blueprint(views_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(cars_bp)
    app.register_blueprint(rentals_bp)
    _register_error_handlers(app)

    return app
