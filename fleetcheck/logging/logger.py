"""
Logging infrastructure for fleetcheck.

Provides structured logging with:
- Component-specific loggers (checks, metrics)
- Two diagnostic tiers for property checks (DEBUG per cycle, TRACE per node)
- Log rotation and retention
"""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from fleetcheck.config import LogConfig

CHECKS_COMPONENT = "checks"
METRICS_COMPONENT = "metrics"


class FleetCheckLogger:
    """
    Logger setup for fleetcheck with component-specific sinks.

    Features:
    - Structured logging with a bound ``component`` field
    - Separate file for the checks component
    - Log rotation and retention
    """

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        rotation: str = "100 MB",
        retention: str = "1 month",
        level: str = "INFO",
        format_string: Optional[str] = None,
        enable_file_logging: bool = True,
        enable_console_logging: bool = True,
    ):
        """
        Initialize the fleetcheck logger.

        Args:
            log_dir: Directory for log files
            rotation: When to rotate log files
            retention: How long to keep old logs
            level: Default log level
            format_string: Custom format string
            enable_file_logging: Whether to log to files
            enable_console_logging: Whether to log to console
        """
        self.log_dir = log_dir or Path("logs")
        self.rotation = rotation
        self.retention = retention
        self.level = level

        self.format_string = format_string or (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

        # Every record needs a component for the format string
        logger.configure(extra={"component": "system"})

        # Remove default handler
        logger.remove()

        self.handler_ids = []

        if enable_console_logging:
            self.handler_ids.append(
                logger.add(
                    sys.stderr,
                    format=self.format_string,
                    level=level,
                    colorize=True,
                )
            )

        if enable_file_logging:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._add_file_handlers()

        self.logger = logger.bind(component="system")

    def _add_file_handlers(self) -> None:
        """Add the main log file and the per-component check log."""

        self.handler_ids.append(
            logger.add(
                self.log_dir / "fleetcheck.log",
                format=self.format_string,
                level=self.level,
                rotation=self.rotation,
                retention=self.retention,
                compression="zip",
            )
        )

        # Node check diagnostics (TRACE keeps the per-node outcomes)
        self.handler_ids.append(
            logger.add(
                self.log_dir / "checks.log",
                format=self.format_string,
                level="TRACE",
                rotation=self.rotation,
                retention=self.retention,
                compression="zip",
                filter=lambda record: record["extra"].get("component")
                == CHECKS_COMPONENT,
            )
        )

        # Error log (ERROR and above only)
        self.handler_ids.append(
            logger.add(
                self.log_dir / "errors.log",
                format=self.format_string,
                level="ERROR",
                rotation=self.rotation,
                retention=self.retention,
                compression="zip",
            )
        )

    def get_logger(self, component: str) -> Any:
        """
        Get a logger bound to a specific component.

        Args:
            component: Component name (e.g., "checks", "metrics")

        Returns:
            Logger instance bound to the component
        """
        return logger.bind(component=component)

    def shutdown(self) -> None:
        """Remove every handler installed by this instance."""
        for handler_id in self.handler_ids:
            logger.remove(handler_id)
        self.handler_ids = []


def get_component_logger(component: str = "system") -> Any:
    """
    Get a component-specific logger.

    Args:
        component: Component name

    Returns:
        Logger instance

    Example:
        >>> log = get_component_logger("checks")
        >>> log.debug("Enabled (3) Disabled (0)")
    """
    return logger.bind(component=component)


# Global logger instance
_fleetcheck_logger: Optional[FleetCheckLogger] = None


def initialize_logging(log_config: Optional[LogConfig] = None, **kwargs: Any) -> FleetCheckLogger:
    """
    Initialize the fleetcheck logging system.

    This should be called once at application startup.

    Args:
        log_config: Logging section of the configuration (defaults to LogConfig())
        **kwargs: Overrides passed straight to FleetCheckLogger

    Returns:
        Configured FleetCheckLogger instance
    """
    global _fleetcheck_logger

    log_config = log_config or LogConfig()
    options: dict = {
        "log_dir": Path(log_config.log_dir),
        "rotation": log_config.rotation,
        "retention": log_config.retention,
        "level": log_config.level,
        "enable_file_logging": log_config.enable_file_logging,
        "enable_console_logging": log_config.enable_console_logging,
    }
    options.update(kwargs)

    if _fleetcheck_logger is not None:
        _fleetcheck_logger.shutdown()
    _fleetcheck_logger = FleetCheckLogger(**options)
    return _fleetcheck_logger


def get_logger_instance() -> Optional[FleetCheckLogger]:
    """Get the global logger instance."""
    return _fleetcheck_logger
