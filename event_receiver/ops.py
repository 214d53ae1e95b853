"""
Ops HTTP surface: liveness, readiness and Prometheus metrics.

Runs beside the blocking consumer in a daemon thread.
"""
import threading

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from .health import HealthChecker
from .logging import get_logger
from .metrics import Metrics

logger = get_logger()


def create_ops_app(health_checker: HealthChecker, metrics: Metrics) -> FastAPI:
    """
    Build the ops application.

    Args:
        health_checker: Health checker bound to the message source
        metrics: Metrics whose registry is exposed under /metrics

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="Event Receiver Ops",
        version=health_checker.version,
        description="Health and metrics for the event receiver",
    )

    @app.get("/health")
    async def health():
        """Liveness probe - returns 200 while the process is running."""
        return health_checker.liveness()

    @app.get("/health/ready")
    async def health_ready():
        """
        Readiness probe.

        Returns:
            200: Consuming from the broker
            503: Not ready
        """
        result = health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(result, status_code=status_code)

    @app.middleware("http")
    async def refresh_system_metrics(request, call_next):
        if request.url.path.startswith("/metrics"):
            metrics.update_system_metrics()
        return await call_next(request)

    app.mount("/metrics", make_asgi_app(registry=metrics.registry))
    return app


class OpsServer(threading.Thread):
    """Serves the ops app with uvicorn in a background thread."""

    def __init__(self, app: FastAPI, port: int, host: str = "0.0.0.0"):
        super().__init__(daemon=True, name="OpsServer")
        self.port = port
        self.server = uvicorn.Server(
            uvicorn.Config(app, host=host, port=port, log_level="warning", access_log=False)
        )

    def run(self):
        logger.info("ops.started", port=self.port)
        self.server.run()

    def stop(self, timeout: float = 5.0):
        self.server.should_exit = True
        self.join(timeout=timeout)
        logger.info("ops.stopped")
