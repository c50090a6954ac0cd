"""
Order-print orchestration.

Drives Clover through the sequence that should make a physical printer
fire, plus the diagnostic variants used when it does not:

    create items -> create order -> add line items -> lock order
        -> print_event -> fetch order

ERROR POLICY:
    - Any failure BEFORE printing aborts the run. The CloverAPIError is
      tagged with the step that was running and re-raised.
    - Failures DURING printing are captured in the result. The order is
      already created and locked on Clover, so the caller must still learn
      its id.
    - Nothing is retried.

Every call is blocking and made in sequence within the request thread.
The only other wait is the delay before polling a print event.

Usage:
    service = PrintTestService(client)
    service.require_credentials()
    run = service.run_print_test(try_all_devices=True)
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from core.api_client import CloverAPIClient, build_print_payload
from core.exceptions import CloverAPIError, ConfigurationError, MissingIdentifierError
from models.device import Device, parse_devices
from models.order import OrderConfirmation, PrintTestRun
from models.print_event import DevicePrintResult, FanOutResult, PrintDiagnostic, PrintEventState
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

# Dummy items created for every test run (price in cents)
TEST_ITEMS = (
    ("Print Test Item 1", 100),
    ("Print Test Item 2", 100),
)


@contextmanager
def pipeline_step(step: str) -> Iterator[None]:
    """Tag any CloverAPIError raised inside the block with the step name."""
    try:
        yield
    except CloverAPIError as e:
        if e.step is None:
            e.step = step
            e.details["step"] = step
        raise


class PrintTestService:
    """
    Order-Print Orchestrator.

    Holds the Clover client and the immutable polling settings. Keeps no
    state between calls, so one instance serves every request thread.

    Attributes:
        client: Configured CloverAPIClient
        status_delay_seconds: Wait before each print event status check
        max_status_polls: Upper bound on status checks per print event
    """

    def __init__(
        self,
        client: CloverAPIClient,
        status_delay_seconds: float = 2.5,
        max_status_polls: int = 1,
    ):
        self.client = client
        self.status_delay_seconds = status_delay_seconds
        self.max_status_polls = max(1, max_status_polls)

    def require_credentials(self) -> None:
        """
        Raises:
            ConfigurationError: If merchant ID or access token is missing
        """
        if not self.client.is_configured:
            raise ConfigurationError()

    # =========================================================================
    # CREATE AND PRINT
    # =========================================================================

    def run_print_test(
        self,
        device_id: Optional[str] = None,
        try_all_devices: bool = False,
    ) -> PrintTestRun:
        """
        Create a two-item order, lock it, request a print and re-fetch it.

        Args:
            device_id: Print to this device instead of the default firing device
            try_all_devices: Print to every device (device_id is then ignored)

        Returns:
            PrintTestRun with the order id, print outcome and confirmation

        Raises:
            ConfigurationError: If credentials are missing
            CloverAPIError: If a step before printing fails (``step`` is set)
        """
        self.require_credentials()
        client = self.client
        logger.info(
            f"[Config] Clover base URL: {client.base_url} | Merchant: {client.merchant_id}"
            + (f" | deviceId: {device_id}" if device_id else "")
        )

        # Step 1: dummy items
        with pipeline_step("create_items"):
            logger.info("[Step 1] Creating dummy test items...")
            items = [client.create_item(name, price) for name, price in TEST_ITEMS]
            item_ids = [_id_of(item) for item in items]
            if not all(item_ids):
                logger.error(f"[Step 1] Item creation failed: {items}")
                raise MissingIdentifierError(
                    "Dummy item creation returned no id", step="create_items", clover_response=items
                )
            logger.info(f"[Step 1] Dummy items created: {', '.join(item_ids)}")

        # Step 2: open order
        with pipeline_step("create_order"):
            logger.info("[Step 2] Creating Clover order...")
            created = client.create_order("open")
            order_id = _id_of(created)
            if not order_id:
                logger.error(f"[Step 2] No order id in response: {created}")
                raise MissingIdentifierError(
                    "Order creation returned no id", step="create_order", clover_response=created
                )
            logger.info(f"[Step 2] Order created: {order_id}")

        # Step 3: line items
        with pipeline_step("add_line_items"):
            logger.info("[Step 3] Adding line items...")
            for item_id in item_ids:
                client.add_line_item(order_id, item_id, quantity=1)
            logger.info("[Step 3] Line items added.")

        # Step 4: lock (triggers automatic order + kitchen printing)
        with pipeline_step("lock_order"):
            logger.info("[Step 4] Locking order to trigger printing...")
            client.lock_order(order_id)
            logger.info("[Step 4] Order locked.")

        # Step 5: explicit print request
        with pipeline_step("print_event"):
            if try_all_devices:
                print_event = self.print_to_all_devices(order_id).to_dict()
                logger.info(f"[Step 5] Full print results: {json.dumps(print_event)}")
            else:
                print_event = self._print_single_captured(order_id, device_id)

        # Step 6: confirmation
        with pipeline_step("fetch_order"):
            logger.info("[Step 6] Fetching order details for confirmation...")
            confirmation = self.verify_order(order_id)
            logger.info(
                f"[Step 6] Order state: {confirmation.state} | "
                f"Line items: {confirmation.line_item_count}"
            )
            if not confirmation.is_locked:
                logger.warning(f"[Step 6] Order {order_id} is {confirmation.state}, not locked; automatic prints will not fire")

        return PrintTestRun(order_id=order_id, print_event=print_event, confirmation=confirmation)

    def _print_single_captured(self, order_id: str, device_id: Optional[str]) -> Dict[str, Any]:
        """One print request; a failure becomes part of the result."""
        target = f"to device {device_id}" if device_id else "to default order printer"
        logger.info(f"[Step 5] Sending print_event {target}...")
        try:
            data = self.client.create_print_event(order_id, device_id)
        except CloverAPIError as e:
            logger.warning(f"[Step 5] print_event failed: {e.clover_status} {e.clover_response or e.message}")
            return {"error": e.error_message, "cloverResponse": e.clover_response}

        logger.info(f"[Step 5] Clover print_event response: {json.dumps(data, default=str)}")
        return data

    # =========================================================================
    # PRINT REQUESTS
    # =========================================================================

    def print_to_all_devices(self, order_id: str) -> FanOutResult:
        """
        Send the order to every device, one at a time.

        A failing device is recorded and the loop moves on; only the device
        listing itself can raise.

        Raises:
            CloverAPIError: If the device list cannot be fetched
        """
        fan_out = FanOutResult()
        for device in self._printable_devices():
            try:
                data = self.client.create_print_event(order_id, device.id)
            except CloverAPIError as e:
                logger.warning(f"Print to device {device.id} ({device.model}) failed: {e.error_message}")
                fan_out.results.append(DevicePrintResult(
                    device_id=device.id, model=device.model, success=False, error=e.error_message,
                ))
                continue

            logger.info(f"Print sent to device {device.id} {device.model}")
            fan_out.results.append(DevicePrintResult(
                device_id=device.id,
                model=device.model,
                success=True,
                state=data.get("state") if isinstance(data, dict) else None,
            ))

        if fan_out.failed_count:
            logger.warning(f"{fan_out.failed_count} of {len(fan_out.results)} devices rejected the print for order {order_id}")
        return fan_out

    def send_print(
        self,
        order_id: str,
        device_id: Optional[str] = None,
        try_all_devices: bool = False,
    ) -> Dict[str, Any]:
        """
        Re-send a print for an existing order.

        Returns:
            Fan-out results when try_all_devices, else {id, state, deviceRef}
            of the created print event

        Raises:
            ConfigurationError: If credentials are missing
            CloverAPIError: If the single print (or device listing) fails
        """
        self.require_credentials()
        if try_all_devices:
            return self.print_to_all_devices(order_id).to_dict()

        logger.info(f"[Send-print] orderId: {order_id}" + (f" | deviceId: {device_id}" if device_id else ""))
        data = self.client.create_print_event(order_id, device_id)
        data = data if isinstance(data, dict) else {}
        return {"id": data.get("id"), "state": data.get("state"), "deviceRef": data.get("deviceRef")}

    # =========================================================================
    # DEBUG PRINT
    # =========================================================================

    def debug_print(
        self,
        order_id: str,
        device_id: Optional[str] = None,
        try_all_devices: bool = False,
    ) -> PrintDiagnostic:
        """
        Send print(s) for an order and poll each event to explain the outcome.

        Print and polling failures are recorded in the diagnostic, never
        raised.

        Raises:
            ConfigurationError: If credentials are missing
            CloverAPIError: If the device list cannot be fetched
        """
        self.require_credentials()
        diagnostic = PrintDiagnostic(
            base_url=self.client.base_url,
            merchant_id=self.client.merchant_id,
            order_id=order_id,
        )

        if try_all_devices:
            for device in self._printable_devices():
                self._debug_one(diagnostic, device.id, model=device.model, per_device=True)
        else:
            self._debug_one(diagnostic, device_id)

        if not diagnostic.why_no_print and diagnostic.status_checks:
            diagnostic.why_no_print.append(
                "No status or error captured. Check statusChecks and printRequests above."
            )

        logger.info(
            f"[Debug-print] orderId: {order_id} | requests: {len(diagnostic.print_requests)} "
            f"| status checks: {len(diagnostic.status_checks)}"
        )
        return diagnostic

    def _debug_one(
        self,
        diagnostic: PrintDiagnostic,
        device_id: Optional[str],
        model: Optional[str] = None,
        per_device: bool = False,
    ) -> None:
        """Send one print request and record what happened to it."""
        order_id = diagnostic.order_id
        entry: Dict[str, Any] = {"sent": build_print_payload(order_id, device_id)}
        if per_device:
            entry["deviceId"] = device_id
            entry["deviceModel"] = model
        diagnostic.print_requests.append(entry)

        prefix = f"Device {device_id} ({model}): " if per_device else ""

        try:
            data = self.client.create_print_event(order_id, device_id)
        except CloverAPIError as e:
            error = e.clover_response if e.clover_response is not None else e.message
            entry["cloverResponse"] = None
            entry["error"] = error
            entry["httpStatus"] = e.clover_status
            diagnostic.why_no_print.append(
                f"{prefix}print_event failed: {e.clover_status or ''} {json.dumps(error, default=str)}"
            )
            return

        entry["cloverResponse"] = data
        event_id = _id_of(data)
        if not event_id:
            diagnostic.why_no_print.append(
                f"{prefix}Clover did not return print event id. Response: {json.dumps(data, default=str)}"
            )
            return

        observation, polls = self.poll_print_event(event_id)
        # after2s is the key existing clients read; afterDelay names the configured delay
        check: Dict[str, Any] = {
            "eventId": event_id,
            "delaySeconds": self.status_delay_seconds,
            "polls": polls,
            "after2s": observation,
            "afterDelay": observation,
        }
        if per_device:
            check["deviceId"] = device_id
        diagnostic.status_checks.append(check)
        diagnostic.explain_state(observation, device_id if per_device else None, model)

    def poll_print_event(self, event_id: str) -> Tuple[Any, int]:
        """
        Check a print event after the configured delay.

        Polls up to max_status_polls times, stopping early on DONE/FAILED
        or on a failed status call.

        Returns:
            (last observation, number of polls made). A failed status call
            is observed as {"error": ...}.
        """
        observation: Any = {}
        polls = 0
        while polls < self.max_status_polls:
            time.sleep(self.status_delay_seconds)
            polls += 1
            try:
                observation = self.client.get_print_event(event_id)
            except CloverAPIError as e:
                logger.warning(f"Status check for print event {event_id} failed: {e.message}")
                observation = {"error": e.clover_response if e.clover_response is not None else e.message}
                break

            state = PrintEventState.parse(observation.get("state")) if isinstance(observation, dict) else None
            if state is not None and state.is_terminal:
                break

        return observation, polls

    # =========================================================================
    # READ-ONLY
    # =========================================================================

    def list_devices(self) -> List[Device]:
        """
        Raises:
            ConfigurationError: If credentials are missing
            CloverAPIError: If the device list cannot be fetched
        """
        self.require_credentials()
        devices = parse_devices(self.client.list_devices())
        logger.info(f"[Devices] Count: {len(devices)}")
        return devices

    def check_connection(self) -> int:
        """
        Make the cheapest authenticated read (last order) to prove the token
        and base URL work.

        Returns:
            Number of orders returned (0 or 1)
        """
        self.require_credentials()
        data = self.client.list_orders(limit=1)
        elements = data.get("elements") if isinstance(data, dict) else None
        return len(elements) if isinstance(elements, list) else 0

    def verify_order(self, order_id: str) -> OrderConfirmation:
        """Re-fetch an order with its line items."""
        self.require_credentials()
        return OrderConfirmation.from_clover(self.client.get_order(order_id, expand="lineItems"), order_id)

    def _printable_devices(self) -> List[Device]:
        return [d for d in parse_devices(self.client.list_devices()) if d.id]


def _id_of(data: Any) -> Optional[str]:
    return data.get("id") if isinstance(data, dict) else None
