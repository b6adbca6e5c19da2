"""Structured logging, tracing and metrics for the cafe ordering service."""

from cafe_ordering_service.observability.config import configure_logging, setup_observability
from cafe_ordering_service.observability.decorators import traced

__all__ = ["configure_logging", "setup_observability", "traced"]
