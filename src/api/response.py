"""Response formatting for the posts handlers."""

import json
from decimal import Decimal

from src.api.errors import ApiError, StoreError
from src.config.settings import get_settings


def _json_default(value):
    # Numbers read back from DynamoDB are Decimal
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return str(value)


def response(status_code: int, message) -> dict:
    """Build a {statusCode, body} result with the message serialized as JSON."""
    return {
        "statusCode": status_code,
        "body": json.dumps(message, default=_json_default),
    }


def error_response(exc: ApiError) -> dict:
    return response(exc.status_code, {"error": exc.message})


def store_error_response(exc: StoreError) -> dict:
    """Pass the store's status through; hide the raw payload if configured."""
    if get_settings().expose_store_errors:
        return response(exc.status_code, exc.payload)
    return response(exc.status_code, {"error": "Store request failed", "code": exc.code})
