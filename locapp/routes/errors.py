from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

bp = Blueprint("errors", __name__)


@bp.app_errorhandler(Exception)
def handle_exception(error: Exception):
    request_id = getattr(g, "request_id", None)

    # HTTP errors other than 500 keep their status code and description.
    if isinstance(error, HTTPException) and error.code != 500:
        return (
            jsonify(
                {
                    "error": error.description or error.name,
                    "path": request.path,
                    "request_id": request_id,
                }
            ),
            error.code,
        )

    root_error: BaseException | None = getattr(error, "original_exception", None)
    if root_error is None or not isinstance(root_error, BaseException):
        root_error = error

    current_app.logger.exception("Unhandled exception", exc_info=root_error)

    return (
        jsonify(
            {
                "error": "Internal Server Error",
                "endpoint": request.endpoint,
                "path": request.path,
                "request_id": request_id,
            }
        ),
        500,
    )
