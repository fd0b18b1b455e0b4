"""
Logging infrastructure for fleetcheck.

Provides loguru setup and component-bound loggers.
"""

from .logger import (
    CHECKS_COMPONENT,
    METRICS_COMPONENT,
    FleetCheckLogger,
    get_component_logger,
    get_logger_instance,
    initialize_logging,
)

__all__ = [
    "CHECKS_COMPONENT",
    "METRICS_COMPONENT",
    "FleetCheckLogger",
    "get_component_logger",
    "get_logger_instance",
    "initialize_logging",
]
