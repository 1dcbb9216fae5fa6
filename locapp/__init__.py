import uuid

from flask import Flask, g, request

from config import Config
from .routes import errors, locations
from .utils.logging import configure_logging


REQUEST_ID_HEADER = "X-Request-ID"


def _resolve_request_id() -> str:
    incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if incoming and len(incoming) <= 64:
        return incoming
    return uuid.uuid4().hex


def create_app(config_override=None):
    app = Flask(__name__)

    # load configuration from environment variables
    app.config.from_object(Config)
    if config_override:
        app.config.update(config_override)

    log_path = configure_logging(app)
    app.config["LOG_PATH"] = str(log_path)

    @app.before_request
    def _assign_request_id():
        g.request_id = _resolve_request_id()

    @app.after_request
    def _echo_request_id(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response

    # register blueprints
    app.register_blueprint(errors.bp)
    app.register_blueprint(locations.bp)

    app.logger.info(
        "Location pattern console ready (preview limit %s, max names %s)",
        app.config.get("LOCATION_PATTERN_PREVIEW_LIMIT"),
        app.config.get("LOCATION_PATTERN_MAX_NAMES"),
    )
    return app
