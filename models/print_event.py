"""
Print event models.

A print event is Clover's record of one request to print an order on a
device. This service creates them and observes their state; it never
drives the state itself.

Lifecycle (as observed):
    CREATED -> PRINTING -> (DONE | FAILED)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PrintEventState(Enum):
    """Known Clover print event states."""

    CREATED = "CREATED"
    """Event accepted, not yet picked up by the device."""

    PRINTING = "PRINTING"
    """Device is printing."""

    DONE = "DONE"
    """Job reached the device."""

    FAILED = "FAILED"
    """Device or printer reported a failure."""

    @property
    def is_terminal(self) -> bool:
        return self in (PrintEventState.DONE, PrintEventState.FAILED)

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PrintEventState"]:
        """Known state for value, or None for unknown/missing states."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class DevicePrintResult:
    """Outcome of one print request in an all-devices fan-out."""

    device_id: str
    model: Optional[str]
    success: bool
    state: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "deviceId": self.device_id,
            "model": self.model,
            "success": self.success,
        }
        if self.success:
            result["state"] = self.state
        else:
            result["error"] = self.error
        return result


@dataclass
class FanOutResult:
    """Per-device results of sending one order to every device."""

    results: List[DevicePrintResult] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tryAllDevices": True,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class PrintDiagnostic:
    """
    Everything debug-print learned about why an order did not print.

    Attributes:
        base_url: Clover API root in use
        merchant_id: Merchant the prints were sent for
        order_id: Order that was printed
        print_requests: One entry per print_event call (payload, response,
            error, target device)
        status_checks: One entry per polled event (final observation)
        why_no_print: Human-readable explanation per observation
    """

    base_url: str
    merchant_id: Optional[str]
    order_id: str
    print_requests: List[Dict[str, Any]] = field(default_factory=list)
    status_checks: List[Dict[str, Any]] = field(default_factory=list)
    why_no_print: List[str] = field(default_factory=list)

    def explain_state(self, observation: Dict[str, Any], device_id: Optional[str] = None,
                      model: Optional[str] = None) -> None:
        """Append a whyNoPrint entry for a polled print event."""
        state = observation.get("state") if isinstance(observation, dict) else None
        prefix = f"Device {device_id} ({model}): " if device_id else ""

        if state == PrintEventState.FAILED.value:
            self.why_no_print.append(
                f"{prefix}Print event state FAILED – device or printer problem. "
                "Check Order Printer on that Clover device."
            )
        elif state == PrintEventState.DONE.value:
            self.why_no_print.append(
                f"{prefix}State DONE – job reached the device. If no paper, the Star "
                "printer may be disconnected or attached to another device."
            )
        elif state:
            self.why_no_print.append(
                f"{prefix}State {state} – job may still be processing or device offline."
            )
        elif isinstance(observation, dict) and "error" in observation:
            who = f"Device {device_id}: " if device_id else ""
            self.why_no_print.append(
                f"{who}Could not get event status – {json.dumps(observation['error'], default=str)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": {"baseURL": self.base_url, "merchantId": self.merchant_id},
            "orderId": self.order_id,
            "printRequests": self.print_requests,
            "statusChecks": self.status_checks,
            "whyNoPrint": self.why_no_print,
        }
