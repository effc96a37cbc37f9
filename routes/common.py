# routes/common.py
from flask import request

from utils.errors import ValidationFailed


def json_body(default=None):
    """Parsed JSON request body; raises ValidationFailed on malformed JSON."""
    if not request.data:
        if default is not None:
            return default
        raise ValidationFailed("Request body is required.")
    try:
        return request.get_json(force=True)
    except Exception:
        raise ValidationFailed("Invalid JSON")


def json_object_body():
    payload = json_body()
    if not isinstance(payload, dict):
        raise ValidationFailed("Request body must be a JSON object.")
    return payload


def required_int_arg(name: str) -> int:
    value = request.args.get(name, type=int)
    if value is None:
        raise ValidationFailed(f"{name} query parameter is required.")
    return value
