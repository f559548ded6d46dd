"""
Request helpers shared by the blueprints.

Protected views are wrapped in @require_caller, which resolves the
Authorization header to a CallerIdentity before the view body runs.
"""

from functools import wraps

from flask import current_app, g, request

from expense_tracker.exceptions import ValidationError
from expense_tracker.models import CallerIdentity


EXTENSION_KEY = "expense_tracker"


def components():
    return current_app.extensions[EXTENSION_KEY]


def require_caller(view):
    """Resolve the caller and expose it as ``g.caller``."""

    @wraps(view)
    async def wrapper(*args, **kwargs):
        g.caller = await components().identity_resolver.resolve(
            request.headers.get("Authorization")
        )
        return await view(*args, **kwargs)

    return wrapper


def current_caller() -> CallerIdentity:
    return g.caller


def json_body() -> dict:
    """The request body as a JSON object. Anything else is a ValidationError."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def parse_id(raw: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid expense ID")
    if value <= 0:
        raise ValidationError("Invalid expense ID")
    return value
