"""
Clover REST API client.

Thin wrapper around per-thread ``requests.Session`` objects configured with the Clover
base URL and bearer token. Each method maps to exactly one Clover call and
returns the decoded JSON body. Nothing is retried.

ERRORS:
    Any non-2xx response or transport failure raises CloverAPIError
    carrying the upstream status, decoded body and URL. Callers decide
    whether the failure is fatal.

Usage:
    client = CloverAPIClient(
        base_url="https://api.clover.com",
        merchant_id="ABC123",
        access_token="...",
    )

    item = client.create_item("Print Test Item 1", 100)
    order = client.create_order()
    client.add_line_item(order["id"], item["id"])
    client.lock_order(order["id"])
    event = client.create_print_event(order["id"], device_id=None)
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Any, Optional

import requests

from .exceptions import CloverAPIError


class CloverAPIClient:
    """
    Client for the merchant-scoped Clover v3 endpoints.

    All paths are relative to ``/v3/merchants/{merchant_id}``.

    Attributes:
        base_url: Clover API root (production, sandbox or regional)
        merchant_id: Merchant the calls are made for
    """

    def __init__(
        self,
        base_url: str,
        merchant_id: Optional[str],
        access_token: Optional[str],
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Clover API root URL
            merchant_id: Clover merchant ID (may be None if unconfigured)
            access_token: Bearer token (may be None if unconfigured)
            timeout: Seconds before a single call gives up
            session: Optional session shared by all threads (tests inject a mock);
                by default each thread builds its own
            logger: Logger instance (creates default if not provided)
        """
        self.base_url = base_url.rstrip("/")
        self.merchant_id = merchant_id
        self._access_token = access_token
        self._timeout = timeout
        self._logger = logger or logging.getLogger("clover_print_test.core.api_client")

        # requests.Session is not thread-safe: each request thread gets its own
        # unless a session is injected
        self._injected_session = session
        self._local = threading.local()
        if session is not None:
            self._apply_headers(session)

    @property
    def session(self) -> requests.Session:
        """Session for the calling thread (created on first use)."""
        if self._injected_session is not None:
            return self._injected_session

        session = getattr(self._local, "session", None)
        if session is None:
            session = self._apply_headers(requests.Session())
            self._local.session = session
            self._logger.debug(f"[Thread {threading.get_ident()}] Clover session created")
        return session

    def _apply_headers(self, session: requests.Session) -> requests.Session:
        session.headers.update({
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        })
        return session

    @property
    def is_configured(self) -> bool:
        """True when both merchant ID and access token are set."""
        return bool(self.merchant_id and self._access_token)

    # =========================================================================
    # ITEMS
    # =========================================================================

    def create_item(self, name: str, price: int) -> Dict[str, Any]:
        """
        Create an inventory item.

        Args:
            name: Item name
            price: Price in cents

        Returns:
            Created item (contains "id")
        """
        return self._request("POST", "/items", json={"name": name, "price": price})

    # =========================================================================
    # ORDERS
    # =========================================================================

    def create_order(self, state: str = "open") -> Dict[str, Any]:
        """Create an empty order in the given state."""
        return self._request("POST", "/orders", json={"state": state})

    def add_line_item(self, order_id: str, item_id: str, quantity: int = 1) -> Dict[str, Any]:
        """Attach an existing item to an order."""
        return self._request(
            "POST",
            f"/orders/{order_id}/line_items",
            json={"item": {"id": item_id}, "quantity": quantity},
        )

    def update_order_state(self, order_id: str, state: str) -> Dict[str, Any]:
        """Change the state of an order (Clover updates orders with POST)."""
        return self._request("POST", f"/orders/{order_id}", json={"state": state})

    def lock_order(self, order_id: str) -> Dict[str, Any]:
        """Lock an order. Locking fires the automatic order/kitchen prints."""
        return self.update_order_state(order_id, "locked")

    def get_order(self, order_id: str, expand: Optional[str] = "lineItems") -> Dict[str, Any]:
        """Fetch one order, expanding line items by default."""
        params = {"expand": expand} if expand else None
        return self._request("GET", f"/orders/{order_id}", params=params)

    def list_orders(self, limit: int = 1) -> Dict[str, Any]:
        """List the most recent orders. Clover wraps them under "elements"."""
        return self._request("GET", "/orders", params={"limit": limit})

    # =========================================================================
    # PRINTING
    # =========================================================================

    def create_print_event(self, order_id: str, device_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Ask Clover to print an order.

        Args:
            order_id: Order to print
            device_id: Target device; when omitted Clover uses the default
                firing device

        Returns:
            Print event (typically "id" and "state")
        """
        return self._request("POST", "/print_event", json=build_print_payload(order_id, device_id))

    def get_print_event(self, event_id: str) -> Dict[str, Any]:
        """Fetch a print event to read its current state."""
        return self._request("GET", f"/print_event/{event_id}")

    # =========================================================================
    # DEVICES
    # =========================================================================

    def list_devices(self) -> Any:
        """
        List the merchant's devices.

        Returns the raw body; Clover may send a bare list or wrap the devices
        under "elements" or "data". Use models.device.normalize_devices().
        """
        return self._request("GET", "/devices")

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _url(self, path: str) -> str:
        return f"{self.base_url}/v3/merchants/{self.merchant_id}{path}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Perform one Clover call and decode the JSON body.

        Raises:
            CloverAPIError: On transport failure or non-2xx status
        """
        url = self._url(path)
        self._logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            self._logger.error(f"{method} {url} failed: {e}")
            raise CloverAPIError(str(e), url=url) from e

        data = _decode_body(response)

        if not response.ok:
            raise CloverAPIError(
                f"Request failed with status code {response.status_code}",
                clover_status=response.status_code,
                clover_response=data,
                url=url,
            )

        return data


def build_print_payload(order_id: str, device_id: Optional[str] = None) -> Dict[str, Any]:
    """Body for POST /print_event. deviceRef is only sent when targeting a device."""
    payload: Dict[str, Any] = {"orderRef": {"id": order_id}}
    if device_id:
        payload["deviceRef"] = {"id": device_id}
    return payload


def _decode_body(response: requests.Response) -> Any:
    """JSON body if there is one, raw text otherwise, {} when empty."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text
