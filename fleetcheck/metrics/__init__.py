"""
Metric sinks for check results.

Provides the sink interface, an in-memory recording sink, and a
Prometheus gauge sink.
"""

from fleetcheck.metrics.sink import (
    GaugeSample,
    MetricSink,
    RecordingGaugeSink,
)
from fleetcheck.metrics.prometheus import (
    PrometheusGaugeSink,
    create_gauge_sink,
)

__all__ = [
    # Sink interface
    "MetricSink",
    "GaugeSample",
    "RecordingGaugeSink",
    # Prometheus
    "PrometheusGaugeSink",
    "create_gauge_sink",
]
