"""
Prometheus-backed gauge sink.

The gauge is registered once, into the registry passed at construction,
and updated every cycle.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Gauge

from fleetcheck.checks.errors import SinkFailureError
from fleetcheck.config import MetricsConfig
from fleetcheck.logging import METRICS_COMPONENT, get_component_logger
from fleetcheck.metrics.sink import MetricSink

log = get_component_logger(METRICS_COMPONENT)


class PrometheusGaugeSink(MetricSink):
    """Labeled ``prometheus_client.Gauge`` with a single label dimension."""

    def __init__(
        self,
        name: str,
        documentation: str,
        label_name: str,
        registry: CollectorRegistry,
        namespace: str = "",
    ):
        """
        Create and register the gauge.

        Args:
            name: Metric name
            documentation: Help text
            label_name: Name of the single label dimension
            registry: Registry the gauge is registered into
            namespace: Optional metric name prefix

        Raises:
            ValueError: If a metric with the same name is already registered
        """
        self.label_name = label_name
        self.registry = registry
        self.gauge = Gauge(
            name,
            documentation,
            [label_name],
            namespace=namespace,
            registry=registry,
        )
        log.debug(f"Registered gauge {self.gauge._name} with label {label_name!r}")

    def set_labeled_value(self, label_value: str, value: float) -> None:
        try:
            self.gauge.labels(label_value).set(value)
        except (TypeError, ValueError) as e:
            raise SinkFailureError(
                f"Failed to set {self.label_name}={label_value!r} to {value!r}: {e}",
                label=label_value,
                value=value,
            ) from e

    def get_value(self, label_value: str) -> Optional[float]:
        """Read the current value of a label back from the registry."""
        return self.registry.get_sample_value(
            self.gauge._name, {self.label_name: label_value}
        )


def create_gauge_sink(
    metrics_config: Optional[MetricsConfig] = None,
    registry: Optional[CollectorRegistry] = None,
) -> PrometheusGaugeSink:
    """
    Build the check gauge from configuration.

    Args:
        metrics_config: Metric naming (defaults to MetricsConfig())
        registry: Registry to register into (defaults to a fresh one)

    Returns:
        Registered PrometheusGaugeSink
    """
    metrics_config = metrics_config or MetricsConfig()
    return PrometheusGaugeSink(
        name=metrics_config.name,
        documentation=metrics_config.help,
        label_name=metrics_config.label_name,
        registry=registry if registry is not None else CollectorRegistry(),
        namespace=metrics_config.namespace or "",
    )
