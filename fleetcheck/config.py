"""
Configuration management for fleetcheck.

This module provides centralized configuration for all system components:
- Logging settings
- Metric naming and labels
- Property check behavior
"""

import os
from typing import Literal, Optional, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class LogConfig(BaseModel):
    """Configuration for logging system."""

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "<level>{message}</level>",
        description="Log message format",
    )
    rotation: str = Field(default="100 MB", description="Log file rotation size")
    retention: str = Field(default="1 month", description="Log file retention period")
    log_dir: str = Field(default="logs", description="Directory for log files")
    enable_file_logging: bool = Field(
        default=False, description="Whether to enable file logging"
    )
    enable_console_logging: bool = Field(
        default=True, description="Whether to enable console logging"
    )


class MetricsConfig(BaseModel):
    """Configuration for the gauge vector the property checks report into."""

    name: str = Field(
        default="vsphere_vm_cbt_checks", min_length=1, description="Gauge metric name"
    )
    help: str = Field(
        default="Boolean metric based on whether ctkEnabled is consistent or not "
        "across all nodes in the cluster.",
        description="Gauge help text",
    )
    label_name: str = Field(
        default="cbt", min_length=1, description="Single label dimension of the gauge"
    )
    mismatch_label: str = Field(
        default="MISMATCH", min_length=1, description="Label value of the mismatch series"
    )
    namespace: Optional[str] = Field(
        default=None, description="Optional metric namespace prefix"
    )


class CheckConfig(BaseModel):
    """Configuration for the node property check."""

    property_key: str = Field(
        default="ctkEnabled", min_length=1, description="Extra config key to inspect"
    )
    strict: bool = Field(
        default=False,
        description="Reject values that are neither 'true' nor 'false' instead of "
        "classifying them as disabled",
    )
    seed_labels: bool = Field(
        default=False,
        description="Track every classification label from the first cycle so "
        "absent classifications are exported as zero",
    )


class Config(BaseModel):
    """Main configuration object for fleetcheck."""

    logging: LogConfig = Field(default_factory=LogConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        return cls(
            logging=LogConfig(
                level=cast(
                    Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                    os.getenv("LOG_LEVEL", "INFO"),
                ),
                log_dir=os.getenv("FLEETCHECK_LOG_DIR", "logs"),
                enable_file_logging=_env_flag("FLEETCHECK_FILE_LOGGING"),
            ),
            metrics=MetricsConfig(
                name=os.getenv("FLEETCHECK_METRIC_NAME", "vsphere_vm_cbt_checks"),
                label_name=os.getenv("FLEETCHECK_METRIC_LABEL", "cbt"),
                namespace=os.getenv("FLEETCHECK_METRIC_NAMESPACE") or None,
            ),
            check=CheckConfig(
                property_key=os.getenv("FLEETCHECK_PROPERTY_KEY", "ctkEnabled"),
                strict=_env_flag("FLEETCHECK_STRICT"),
                seed_labels=_env_flag("FLEETCHECK_SEED_LABELS"),
            ),
        )


# Global configuration instance
config = Config.from_env()
