"""
Flask route blueprints for the Clover print test service.

- main: Index and health check
- test_print: Order creation, printing, diagnostics and verification

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp, ENDPOINTS
from .test_print import test_print_bp

__all__ = [
    "main_bp",
    "test_print_bp",
    "ENDPOINTS",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(test_print_bp)
