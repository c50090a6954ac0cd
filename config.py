"""
Configuration for the Clover print test service.

All values are read ONCE at import time and treated as immutable for the
lifetime of the process. Missing credentials do not stop the app from
starting; every endpoint that talks to Clover refuses to run instead.
"""

import os

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Bind address and port for `python app.py`
    # The debugger is only enabled when HOST is a loopback address
    HOST = os.environ.get("HOST", "127.0.0.1")
    PORT = int(os.environ.get("PORT", "3000"))

    # ==========================================================================
    # Clover API
    # ==========================================================================
    # Sandbox: https://apisandbox.dev.clover.com
    # Europe:  https://api.eu.clover.com
    # ==========================================================================
    CLOVER_BASE_URL = os.environ.get("CLOVER_BASE_URL", "https://api.clover.com")
    CLOVER_MERCHANT_ID = os.environ.get("CLOVER_MERCHANT_ID")
    CLOVER_ACCESS_TOKEN = os.environ.get("CLOVER_ACCESS_TOKEN")

    # Seconds before an outbound Clover call gives up
    CLOVER_REQUEST_TIMEOUT = float(os.environ.get("CLOVER_REQUEST_TIMEOUT", "30"))

    # ==========================================================================
    # Print event status polling (debug-print)
    # ==========================================================================
    # PRINT_STATUS_DELAY_SECONDS: wait before each status check
    # PRINT_STATUS_MAX_POLLS: checks per print event; polling stops early
    #   once the event reaches DONE or FAILED. 1 = single check.
    # ==========================================================================
    PRINT_STATUS_DELAY_SECONDS = float(
        os.environ.get("PRINT_STATUS_DELAY_SECONDS", "2.5")
    )
    PRINT_STATUS_MAX_POLLS = int(os.environ.get("PRINT_STATUS_MAX_POLLS", "1"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "production"


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
    CLOVER_BASE_URL = "https://apisandbox.dev.clover.com"
    CLOVER_MERCHANT_ID = "TESTMERCHANT"
    CLOVER_ACCESS_TOKEN = "test-token"
    PRINT_STATUS_DELAY_SECONDS = 0.0
    PRINT_STATUS_MAX_POLLS = 1
