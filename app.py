"""
Clover Print Test - Flask Application Entry Point.

Tests that reception + kitchen printers fire when an order is created and
locked on Clover. This is a slim app factory that:
1. Loads .env and configuration
2. Configures logging
3. Builds the Clover API client and the print test service
4. Registers route blueprints
5. Sets up JSON error handlers

ARCHITECTURE:
    Request Thread (one per inbound request)
    └── PrintTestService -> CloverAPIClient -> Clover REST API
        (every call blocking and in sequence)

NO SHARED MUTABLE STATE: configuration is read once at startup and the
service keeps nothing between requests. All order state lives on Clover.

RUNNING:
    1. Set CLOVER_MERCHANT_ID, CLOVER_ACCESS_TOKEN (and optionally
       CLOVER_BASE_URL, HOST, PORT) in .env
    2. python app.py
    3. POST http://localhost:3000/test-print
    4. Confirm the printers fired; GET /test-print/verify/<orderId> to
       re-check the order remotely.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Union

from dotenv import load_dotenv
from flask import Flask

from logging_config import setup_logging, get_logger
from core.api_client import CloverAPIClient
from core.exceptions import PrintTestError
from services.print_test_service import PrintTestService
from routes import register_blueprints, ENDPOINTS


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_object: Union[str, type] = "config.Config") -> Flask:
    """
    Application factory - creates and configures Flask app.

    Missing Clover credentials do NOT stop startup; endpoints answer 400
    until they are configured.

    Args:
        config_object: Import path or class passed to app.config.from_object()

    Returns:
        Configured Flask application
    """
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json.sort_keys = False

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting Clover print test in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    client = CloverAPIClient(
        base_url=app.config["CLOVER_BASE_URL"],
        merchant_id=app.config.get("CLOVER_MERCHANT_ID"),
        access_token=app.config.get("CLOVER_ACCESS_TOKEN"),
        timeout=app.config.get("CLOVER_REQUEST_TIMEOUT", 30.0),
        logger=get_logger("core.api_client"),
    )
    if not client.is_configured:
        logger.warning("CLOVER_MERCHANT_ID or CLOVER_ACCESS_TOKEN missing - endpoints will answer 400")

    app.config["CLOVER_CLIENT"] = client
    app.config["PRINT_TEST_SERVICE"] = PrintTestService(
        client,
        status_delay_seconds=app.config.get("PRINT_STATUS_DELAY_SECONDS", 2.5),
        max_status_polls=app.config.get("PRINT_STATUS_MAX_POLLS", 1),
    )
    logger.info(f"Clover client ready for {client.base_url}")

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(PrintTestError)
    def handle_print_test_error(e: PrintTestError):
        logger.warning(f"{type(e).__name__}: {e}")
        return e.to_dict(), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return {"success": False, "error": "Not found. GET / lists the available endpoints."}, 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return {"success": False, "error": str(e)}, 405

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {"success": False, "error": "An unexpected error occurred."}, 500

    logger.info("Application initialized successfully")
    return app


LOOPBACK_HOSTS = ("127.0.0.1", "localhost", "::1")


def run_options(config) -> Dict[str, Any]:
    """
    Keyword arguments for app.run().

    The Werkzeug debugger allows code execution, so debug is forced off
    whenever the server binds to anything other than loopback.
    """
    host = config.get("HOST") or "127.0.0.1"
    debug = bool(config.get("DEBUG", False))
    if debug and host not in LOOPBACK_HOSTS:
        logger.warning(f"DEBUG ignored: server binds to {host}, debugger only allowed on loopback")
        debug = False

    return {
        "host": host,
        "port": config.get("PORT", 3000),
        "debug": debug,
        "threaded": True,
    }


if __name__ == "__main__":
    app = create_app()
    options = run_options(app.config)
    logger.info(f"Clover print test server listening on http://{options['host']}:{options['port']}")
    for line in ENDPOINTS:
        logger.info(line)
    app.run(**options)
