# libs/relay_shared/metrics.py
"""
Metrics emitted as DEBUG log lines of the ``metrics`` logger.

Example line: ``METRIC counter http_requests_total method=GET path=/health status=200``
"""

from typing import Dict, Optional

from .logging import get_logger

logger = get_logger("metrics")


def _format_labels(labels: Optional[Dict[str, str]]) -> str:
    return " ".join(f"{key}={value}" for key, value in (labels or {}).items())


class Metrics:
    """Namespace for the metric emitters."""

    @staticmethod
    def counter(name: str, labels: Optional[Dict[str, str]] = None) -> None:
        logger.debug(f"METRIC counter {name} {_format_labels(labels)}".rstrip())

    @staticmethod
    def histogram(
        name: str, value: float, labels: Optional[Dict[str, str]] = None
    ) -> None:
        logger.debug(
            f"METRIC histogram {name}={value:.2f} {_format_labels(labels)}".rstrip()
        )
