"""
Health checks for liveness and readiness probes.
"""
from datetime import datetime, timezone
from typing import Dict, Any
import psutil
from .adapters.base import JobQueue
from .logging import get_logger

logger = get_logger()


class HealthChecker:
    """
    Health checker for the listener service.

    Provides:
    - Liveness checks (is the service running?)
    - Readiness checks (can the service enqueue jobs?)
    """

    def __init__(self, queue: JobQueue, service_name: str = "listener", version: str = "0.1.0"):
        self.queue = queue
        self.service_name = service_name
        self.version = version

    def liveness(self) -> Dict[str, Any]:
        return {
            "status": "ok",
            "service": self.service_name,
            "version": self.version,
            "timestamp": _now(),
        }

    async def readiness(self) -> Dict[str, Any]:
        """
        Readiness check.

        Checks:
        - Queue backend connectivity
        - Memory availability

        Returns:
            dict: Readiness status with detailed check results
        """
        checks = {
            "queue": await self._check_queue(),
            "memory": self._check_memory(),
        }
        ready = all(check["status"] != "error" for check in checks.values())

        return {
            "status": "ready" if ready else "not_ready",
            "service": self.service_name,
            "version": self.version,
            "timestamp": _now(),
            "checks": checks,
        }

    async def _check_queue(self) -> Dict[str, Any]:
        if await self.queue.health_check():
            return {"status": "ok", "adapter": type(self.queue).__name__}
        return {"status": "error", "adapter": type(self.queue).__name__}

    def _check_memory(self, threshold_mb: float = 50.0) -> Dict[str, Any]:
        """
        Check available memory.

        Args:
            threshold_mb: Minimum available memory in MB (default: 50.0)
        """
        try:
            memory = psutil.virtual_memory()
        except psutil.Error as e:
            logger.warning("memory_health_check_failed", error=str(e))
            return {"status": "error", "error": str(e)}

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
            "total_mb": round(memory.total / (1024**2), 2),
            "used_percent": memory.percent,
        }


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
