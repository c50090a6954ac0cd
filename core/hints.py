"""
Remediation hints for failed Clover calls.

Maps (failed step, Clover HTTP status) to one short sentence telling the
operator what to check. Status-specific hints win over step-specific ones.
"""

from typing import Any, Optional


def get_hint(step: Optional[str], status: Optional[int], data: Any = None) -> Optional[str]:
    """
    Pick a remediation hint for a failed pipeline step.

    Args:
        step: Pipeline step name (e.g. "lock_order")
        status: HTTP status returned by Clover, or None for transport errors
        data: Clover response body (currently unused by the table)

    Returns:
        Hint text, or None when there is nothing specific to say
    """
    if status == 401:
        return (
            "Invalid or expired token. Check CLOVER_ACCESS_TOKEN and use the correct "
            "Clover environment (sandbox vs production)."
        )
    if status == 403:
        return (
            "Token does not have permission for this action. "
            "Check token scope in Clover Developer Dashboard."
        )
    if status == 404:
        return (
            "Merchant or resource not found. If using sandbox, set "
            "CLOVER_BASE_URL=https://apisandbox.dev.clover.com in .env."
        )
    if status == 422 and step == "lock_order":
        return "Try PATCH instead of POST for order update, or check request body."
    if step == "create_order":
        return (
            "Ensure token has order write permission and CLOVER_BASE_URL matches your "
            "merchant region (e.g. api.eu.clover.com for Europe)."
        )
    return None
