"""
Data models for the Clover print test service.

This module contains dataclasses for:
- Device: Clover terminal summary, plus the device-list normalisation
- PrintEventState / DevicePrintResult / FanOutResult / PrintDiagnostic:
  print requests and what was observed about them
- OrderConfirmation / PrintTestRun: Order state and line-item count after the pipeline

Nothing here is persisted; instances live for one request.
"""

from .device import Device, normalize_devices, parse_devices
from .print_event import PrintEventState, DevicePrintResult, FanOutResult, PrintDiagnostic
from .order import OrderConfirmation, OrderState, PrintTestRun

__all__ = [
    # Device models
    "Device",
    "normalize_devices",
    "parse_devices",
    # Print models
    "PrintEventState",
    "DevicePrintResult",
    "FanOutResult",
    "PrintDiagnostic",
    # Order models
    "OrderConfirmation",
    "OrderState",
    "PrintTestRun",
]
