"""
Core module for the Clover print test service.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- api_client: Clover REST API client
- hints: Remediation hints for failed Clover calls
"""

from .exceptions import (
    PrintTestError,
    ConfigurationError,
    RequestValidationError,
    CloverAPIError,
    MissingIdentifierError,
)
from .api_client import CloverAPIClient, build_print_payload
from .hints import get_hint

__all__ = [
    "PrintTestError",
    "ConfigurationError",
    "RequestValidationError",
    "CloverAPIError",
    "MissingIdentifierError",
    "CloverAPIClient",
    "build_print_payload",
    "get_hint",
]
