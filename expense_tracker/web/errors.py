"""
Maps raised errors to JSON responses.

Server-side failures are recorded as system_error audit events; the
client only ever sees the generic message of the error class.
"""

import structlog
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from expense_tracker.exceptions import ExpenseTrackerError
from expense_tracker.web.context import components


logger = structlog.get_logger(__name__)


def register_error_handlers(app: Flask) -> None:

    @app.errorhandler(ExpenseTrackerError)
    async def handle_core_error(error: ExpenseTrackerError):
        if error.status_code >= 500:
            await components().audit_logger.log_error(
                type(error).__name__,
                error.message,
            )
            return jsonify({"message": error.default_message}), error.status_code
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    async def handle_unexpected(error: Exception):
        logger.exception("unhandled_error", error_type=type(error).__name__)
        await components().audit_logger.log_error(type(error).__name__, str(error))
        return jsonify({"message": "Internal server error"}), 500
