"""
Order confirmation model.

Wraps a Clover order fetched with ``expand=lineItems`` so the routes can
report its state and line-item count without digging through the raw body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class OrderState(Enum):
    """Order states this service sets. Clover knows others."""

    OPEN = "open"
    LOCKED = "locked"


@dataclass(frozen=True)
class OrderConfirmation:
    """Point-in-time view of a Clover order."""

    order_id: Optional[str]
    state: Optional[str]
    line_item_count: int
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_locked(self) -> bool:
        return self.state == OrderState.LOCKED.value

    @classmethod
    def from_clover(cls, data: Any, order_id: Optional[str] = None) -> "OrderConfirmation":
        """
        Create from a GET /orders/{id}?expand=lineItems body.

        Line items arrive as {"lineItems": {"elements": [...]}}; a missing or
        malformed block counts as zero.
        """
        details = data if isinstance(data, dict) else {}
        line_items = details.get("lineItems") or {}
        elements = line_items.get("elements") if isinstance(line_items, dict) else None
        return cls(
            order_id=order_id or details.get("id"),
            state=details.get("state"),
            line_item_count=len(elements) if isinstance(elements, list) else 0,
            details=details,
        )


@dataclass
class PrintTestRun:
    """Result of one create-and-print pipeline run."""

    order_id: str
    """Clover order that was created and locked."""

    print_event: Dict[str, Any]
    """Single print_event body, its captured failure, or the fan-out results."""

    confirmation: OrderConfirmation
    """Order as re-fetched after printing."""
