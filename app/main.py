"""
HTTP entry point for the Expense Tracker.

Run with:
    python -m app.main

Configuration comes from environment variables or a .env file
(JWT_*, STORAGE_*, GOOGLE_SHEETS_*, and the plain app settings such as
PORT and LOG_LEVEL).
"""

import sys

import structlog

from expense_tracker.audit import configure_logging
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.orchestrator import create_app_components
from expense_tracker.web import create_app


logger = structlog.get_logger("app.main")


def main() -> int:
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)

    status = validate_all_settings()
    failed = {key: value for key, value in status.items() if key.endswith("_error")}
    if failed:
        for key, error in failed.items():
            logger.error("settings_invalid", setting=key[:-len("_error")], error=error)
        return 1

    components = create_app_components(settings)
    try:
        app = create_app(components)
        logger.info(
            "server_starting",
            host=app_settings.host,
            port=app_settings.port,
            environment=app_settings.app_environment,
        )
        app.run(host=app_settings.host, port=app_settings.port, debug=app_settings.debug_mode)
    finally:
        components.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
