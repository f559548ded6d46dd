"""
Flask transport for the expense tracker.

The views only translate between HTTP and the core services held in
AppComponents. Status codes for failures come from the raised error.
"""

from flask import Flask, jsonify

from expense_tracker.web.auth import auth_bp
from expense_tracker.web.context import EXTENSION_KEY
from expense_tracker.web.errors import register_error_handlers
from expense_tracker.web.expenses import expenses_bp
from expense_tracker.web.users import users_bp


def create_app(components) -> Flask:
    app = Flask(__name__)
    app.config["DEBUG"] = components.settings.app.debug_mode
    app.extensions[EXTENSION_KEY] = components

    register_error_handlers(app)

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(expenses_bp)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


__all__ = ["create_app"]
