"""
Custom exceptions for the Clover print test service.

Exception Hierarchy:
    PrintTestError (base)
    ├── ConfigurationError      - Merchant ID or access token missing (400)
    ├── RequestValidationError  - Request body is missing a field (400)
    └── CloverAPIError          - A Clover call failed (upstream status or 500)
        └── MissingIdentifierError - Clover answered but returned no id (500)

Usage:
    Local errors are raised before any Clover call is made.
    CloverAPIError carries the upstream status and body so routes can
    forward them to the caller unchanged.
"""

from typing import Optional, Dict, Any


class PrintTestError(Exception):
    """
    Base exception for all print test errors.

    Attributes:
        message: Human-readable error message
        details: Extra context for logs
        status_code: HTTP status the route should answer with
    """

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Response body for this error."""
        return {"success": False, "error": self.message}


# =============================================================================
# LOCAL ERRORS - raised before any Clover call
# =============================================================================

class ConfigurationError(PrintTestError):
    """
    CLOVER_MERCHANT_ID or CLOVER_ACCESS_TOKEN is not configured.

    Every endpoint that talks to Clover raises this before making a call.
    """

    status_code = 400

    def __init__(self, message: str = "Missing CLOVER_MERCHANT_ID or CLOVER_ACCESS_TOKEN in .env"):
        details = {
            "resolution": "Set CLOVER_MERCHANT_ID and CLOVER_ACCESS_TOKEN in .env and restart"
        }
        super().__init__(message, details)


class RequestValidationError(PrintTestError):
    """Request body is missing a required field."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


# =============================================================================
# CLOVER ERRORS
# =============================================================================

class CloverAPIError(PrintTestError):
    """
    A call to the Clover REST API failed.

    Raised for non-2xx responses and for transport failures (DNS, refused
    connection, timeout). Transport failures have no ``clover_status``.

    Attributes:
        clover_status: HTTP status returned by Clover, or None
        clover_response: Decoded response body (dict, or raw text)
        url: Full URL of the failed call
        step: Pipeline step that was running, set by the orchestrator
    """

    def __init__(
        self,
        message: str,
        clover_status: Optional[int] = None,
        clover_response: Any = None,
        url: Optional[str] = None,
        step: Optional[str] = None,
    ):
        details = {"clover_status": clover_status, "url": url}
        if step:
            details["step"] = step
        super().__init__(message, details)
        self.clover_status = clover_status
        self.clover_response = clover_response
        self.url = url
        self.step = step

    @property
    def status_code(self) -> int:
        """Upstream status when it is an error status, otherwise 500."""
        if self.clover_status and self.clover_status >= 400:
            return self.clover_status
        return 500

    @property
    def error_message(self) -> str:
        """Clover's own message if it sent one, else ours."""
        data = self.clover_response
        if isinstance(data, dict):
            return data.get("message") or data.get("error") or self.message
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.error_message,
            "cloverStatus": self.clover_status or 500,
            "cloverResponse": self.clover_response,
        }


class MissingIdentifierError(CloverAPIError):
    """
    Clover accepted a create call but the response had no ``id``.

    Nothing after this step can run, so the pipeline stops with a 500.
    """

    def __init__(self, message: str, step: str, clover_response: Any = None):
        super().__init__(message, clover_response=clover_response, step=step)

    @property
    def status_code(self) -> int:
        return 500

    @property
    def error_message(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "failedStep": self.step,
            "error": self.message,
        }
