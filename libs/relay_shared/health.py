# libs/relay_shared/health.py
"""
Health check utilities for all services.
"""

from typing import Any, Callable, Dict

from .logging import get_logger
from .models import HealthResponse, HealthStatus

logger = get_logger(__name__)


def run_health_check(
    probe: Callable[[], Dict[str, Any]], version: str
) -> HealthResponse:
    """
    Run a service probe and wrap its outcome in a HealthResponse.

    Args:
        probe: Returns service-specific details; any exception marks the
            service unhealthy
        version: Service version

    Returns:
        "ok" with the probe details, or "error" with the exception text
    """
    try:
        details = probe()
    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=e)
        return HealthResponse(
            status=HealthStatus.ERROR, details={"error": str(e)}, version=version
        )
    return HealthResponse(status=HealthStatus.OK, details=details, version=version)
