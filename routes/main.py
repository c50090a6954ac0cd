"""
Main routes (index, health).

Neither route talks to Clover.
"""

from flask import Blueprint, current_app

main_bp = Blueprint("main", __name__)

ENDPOINTS = [
    "POST /test-print               – create order + print (body: { tryAllDevices: true } or { deviceId }).",
    "POST /test-print/send-print    – re-send print (body: { orderId, tryAllDevices: true }).",
    "POST /test-print/debug-print   – debug why no print (body: { orderId, tryAllDevices: true }).",
    "GET  /test-print/how-to-print  – step-by-step to get print on Star printer.",
    "GET  /test-print/check         – verify Clover connection.",
    "GET  /test-print/devices       – list Clover devices.",
    "GET  /test-print/verify/<orderId> – re-check order.",
]


@main_bp.route("/", methods=["GET"])
def index():
    """List the available endpoints."""
    return {
        "service": "Clover print test",
        "endpoints": ENDPOINTS,
    }


@main_bp.route("/health", methods=["GET"])
def health():
    """Health check: configuration only, no Clover call."""
    service = current_app.config.get("PRINT_TEST_SERVICE")
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {
            "baseURL": current_app.config.get("CLOVER_BASE_URL"),
        },
    }

    if service and service.client.is_configured:
        health_status["checks"]["credentials"] = "configured"
    else:
        health_status["checks"]["credentials"] = "missing"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
