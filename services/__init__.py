"""
Services layer for the Clover print test service.

- PrintTestService: drives Clover through create -> lock -> print and the
  diagnostic variants (re-send, debug, devices, connectivity, verify)

One instance is created at startup and shared by all request threads; it
holds no per-request state.
"""

from .print_test_service import PrintTestService, pipeline_step, TEST_ITEMS

__all__ = [
    "PrintTestService",
    "pipeline_step",
    "TEST_ITEMS",
]
