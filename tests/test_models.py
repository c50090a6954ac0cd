"""
Unit tests for devices, print events, order confirmations and hints.
"""

import pytest

from core.exceptions import CloverAPIError, ConfigurationError, MissingIdentifierError
from core.hints import get_hint
from models.device import Device, normalize_devices, parse_devices
from models.order import OrderConfirmation
from models.print_event import DevicePrintResult, FanOutResult, PrintDiagnostic, PrintEventState


DEVICES = [
    {"id": "D1", "name": "Front", "model": "C406", "serial": "S1", "deviceTypeName": "Clover Mini"},
    {"id": "D2", "name": "Kitchen", "model": "C505", "serial": "S2", "deviceTypeName": "Clover Flex"},
]


# Device normalisation

class TestNormalizeDevices:

    @pytest.mark.parametrize("raw", [
        DEVICES,
        {"elements": DEVICES},
        {"data": DEVICES},
    ])
    def test_all_container_shapes_give_same_devices(self, raw):
        assert [d.to_dict() for d in parse_devices(raw)] == [
            Device.from_dict(d).to_dict() for d in DEVICES
        ]

    def test_elements_wins_over_data(self):
        raw = {"elements": [DEVICES[0]], "data": [DEVICES[1]]}
        assert normalize_devices(raw) == [DEVICES[0]]

    def test_null_elements_falls_back_to_data(self):
        assert normalize_devices({"elements": None, "data": DEVICES}) == DEVICES

    @pytest.mark.parametrize("raw", [None, {}, "oops", {"elements": {"id": "D1"}}, {"data": 3}])
    def test_unusable_shapes_give_empty_list(self, raw):
        assert normalize_devices(raw) == []

    def test_summary_shape(self):
        assert Device.from_dict(DEVICES[0]).to_dict() == {
            "id": "D1",
            "name": "Front",
            "model": "C406",
            "serial": "S1",
            "deviceTypeName": "Clover Mini",
        }


# Orders

class TestOrderConfirmation:

    def test_counts_expanded_line_items(self):
        confirmation = OrderConfirmation.from_clover(
            {"id": "O1", "state": "locked", "lineItems": {"elements": [{"id": "L1"}, {"id": "L2"}]}}
        )
        assert confirmation.order_id == "O1"
        assert confirmation.is_locked is True
        assert confirmation.line_item_count == 2

    def test_missing_line_items_count_zero(self):
        confirmation = OrderConfirmation.from_clover({"state": "open"}, order_id="O1")
        assert confirmation.line_item_count == 0
        assert confirmation.is_locked is False

    def test_non_dict_body(self):
        confirmation = OrderConfirmation.from_clover(None, order_id="O1")
        assert confirmation.state is None
        assert confirmation.details == {}


# Print events

class TestPrintEvents:

    def test_state_parsing(self):
        assert PrintEventState.parse("FAILED").is_terminal is True
        assert PrintEventState.parse("PRINTING").is_terminal is False
        assert PrintEventState.parse("QUEUED") is None
        assert PrintEventState.parse(None) is None

    def test_fan_out_shape(self):
        fan_out = FanOutResult([
            DevicePrintResult("D1", "C406", True, state="CREATED"),
            DevicePrintResult("D2", "C505", False, error="Device offline"),
        ])
        assert fan_out.failed_count == 1
        assert fan_out.to_dict() == {
            "tryAllDevices": True,
            "results": [
                {"deviceId": "D1", "model": "C406", "success": True, "state": "CREATED"},
                {"deviceId": "D2", "model": "C505", "success": False, "error": "Device offline"},
            ],
        }


class TestPrintDiagnostic:

    @pytest.fixture
    def diagnostic(self):
        return PrintDiagnostic(base_url="https://api.clover.com", merchant_id="M1", order_id="O1")

    def test_failed_state(self, diagnostic):
        diagnostic.explain_state({"state": "FAILED"})
        assert "FAILED" in diagnostic.why_no_print[0]

    def test_done_state_with_device_prefix(self, diagnostic):
        diagnostic.explain_state({"state": "DONE"}, device_id="D1", model="C406")
        assert diagnostic.why_no_print[0].startswith("Device D1 (C406): State DONE")

    def test_other_state(self, diagnostic):
        diagnostic.explain_state({"state": "CREATED"})
        assert "CREATED" in diagnostic.why_no_print[0]
        assert "offline" in diagnostic.why_no_print[0]

    def test_status_error(self, diagnostic):
        diagnostic.explain_state({"error": {"message": "Not Found"}})
        assert "Could not get event status" in diagnostic.why_no_print[0]
        assert "Not Found" in diagnostic.why_no_print[0]

    def test_to_dict(self, diagnostic):
        assert diagnostic.to_dict() == {
            "config": {"baseURL": "https://api.clover.com", "merchantId": "M1"},
            "orderId": "O1",
            "printRequests": [],
            "statusChecks": [],
            "whyNoPrint": [],
        }


# Hints and exceptions

class TestHints:

    @pytest.mark.parametrize("status, fragment", [
        (401, "Invalid or expired token"),
        (403, "permission"),
        (404, "apisandbox.dev.clover.com"),
    ])
    def test_status_hints_apply_to_any_step(self, status, fragment):
        assert fragment in get_hint("add_line_items", status)

    def test_lock_order_422(self):
        assert "PATCH" in get_hint("lock_order", 422)

    def test_422_elsewhere_has_no_hint(self):
        assert get_hint("add_line_items", 422) is None

    def test_create_order_fallback(self):
        assert "order write permission" in get_hint("create_order", 500)

    def test_status_hint_beats_step_hint(self):
        assert "Invalid or expired token" in get_hint("create_order", 401)


class TestExceptions:

    def test_configuration_error_is_400(self):
        err = ConfigurationError()
        assert err.status_code == 400
        assert err.to_dict() == {
            "success": False,
            "error": "Missing CLOVER_MERCHANT_ID or CLOVER_ACCESS_TOKEN in .env",
        }

    def test_clover_error_below_400_becomes_500(self):
        assert CloverAPIError("weird", clover_status=302).status_code == 500

    def test_clover_error_prefers_upstream_error_key(self):
        err = CloverAPIError("local", clover_status=400, clover_response={"error": "bad body"})
        assert err.error_message == "bad body"

    def test_missing_identifier_reports_step(self):
        err = MissingIdentifierError("Order creation returned no id", step="create_order")
        assert err.status_code == 500
        assert err.to_dict()["failedStep"] == "create_order"
