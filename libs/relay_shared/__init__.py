"""
Utilities shared by the chat and users services: settings base class, JSON
logging, HTTP error builders, guardrails, health reporting and middleware.
"""

from .config import BaseServiceConfig
from .errors import not_found_error, service_error, unauthorized_error, validation_error
from .guardrails import (
    GuardrailViolation,
    handle_guardrail_violation,
    validate_input_length,
    validate_required_text,
)
from .health import run_health_check
from .logging import configure_logging, get_logger
from .metrics import Metrics
from .middleware import CorrelationIdMiddleware, MetricsMiddleware
from .models import (
    ErrorResponse,
    HealthResponse,
    HealthStatus,
    PaginatedResponse,
    PaginationParams,
)

__all__ = [
    "BaseServiceConfig",
    "configure_logging",
    "get_logger",
    "GuardrailViolation",
    "handle_guardrail_violation",
    "validate_input_length",
    "validate_required_text",
    "not_found_error",
    "service_error",
    "unauthorized_error",
    "validation_error",
    "run_health_check",
    "Metrics",
    "CorrelationIdMiddleware",
    "MetricsMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "HealthStatus",
    "PaginatedResponse",
    "PaginationParams",
]
