"""
Health checks for liveness and readiness probes.
"""
from datetime import datetime, timezone
from typing import Dict, Any
import psutil
from .adapters.base import MessageSource
from .logging import get_logger

logger = get_logger()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class HealthChecker:
    """
    Health checker for the event receiver.

    Provides:
    - Liveness checks (is the process running?)
    - Readiness checks (is the broker connection consuming?)
    """

    def __init__(self, source: MessageSource | None = None, service_name: str = "event-receiver", version: str = "0.1.0"):
        self.source = source
        self.service_name = service_name
        self.version = version

    def liveness(self) -> Dict[str, Any]:
        """
        Liveness check - basic health check.

        Returns:
            dict: Health status with service info and timestamp
        """
        return {
            "status": "ok",
            "service": self.service_name,
            "version": self.version,
            "timestamp": _now(),
        }

    def readiness(self) -> Dict[str, Any]:
        """
        Readiness check - comprehensive health check.

        Checks:
        - Message source connectivity
        - Memory availability

        Returns:
            dict: Readiness status with detailed check results
        """
        checks = {
            "source": self._check_source(),
            "memory": self._check_memory(),
        }
        overall_status = "ready"
        if any(check["status"] == "error" for check in checks.values()):
            overall_status = "not_ready"

        return {
            "status": overall_status,
            "service": self.service_name,
            "version": self.version,
            "timestamp": _now(),
            "checks": checks,
        }

    def _check_source(self) -> Dict[str, Any]:
        """
        Check the message source connection.

        Returns:
            dict: Source health check result
        """
        if self.source is None:
            return {
                "status": "error",
                "message": "Message source not attached",
            }

        if self.source.health_check():
            return {"status": "ok"}

        logger.warning("source_health_check_failed")
        return {
            "status": "error",
            "message": "Message source disconnected",
        }

    def _check_memory(self, threshold_mb: float = 50.0) -> Dict[str, Any]:
        """
        Check available memory.

        Args:
            threshold_mb: Minimum available memory in MB (default: 50.0)

        Returns:
            dict: Memory health check result
        """
        try:
            memory = psutil.virtual_memory()
            available_mb = memory.available / (1024**2)

            if available_mb < threshold_mb:
                status = "error"
            elif available_mb < threshold_mb * 2:
                status = "warning"
            else:
                status = "ok"

            return {
                "status": status,
                "available_mb": round(available_mb, 2),
                "used_percent": memory.percent,
            }

        except (psutil.Error, OSError) as e:
            logger.warning("memory_health_check_failed", error=str(e))
            return {
                "status": "error",
                "error": str(e),
            }
