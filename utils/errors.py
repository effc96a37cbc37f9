# utils/errors.py
import json

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException


class AppError(Exception):
    """Base class for errors that map to an HTTP status with a plain message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(AppError):
    status_code = 404


class InvalidState(AppError):
    status_code = 400


class DuplicateResource(AppError):
    status_code = 400


class ValidationFailed(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        app.logger.info("%s: %s", type(err).__name__, err.message)
        return jsonify({"detail": err.message}), err.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(ve: ValidationError):
        # Return pydantic validation errors in a simple format
        return jsonify({"detail": json.loads(ve.json())}), 422

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        if isinstance(err, HTTPException):
            return jsonify({"detail": err.description}), err.code
        app.logger.exception("Unhandled error")
        return jsonify({"detail": "Internal server error"}), 500
