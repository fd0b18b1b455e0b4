"""
Metric sinks for labeled gauge updates.

A sink exposes a single gauge vector with one label dimension. Checks
report into it with ``set_labeled_value``.
"""

import json
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Deque, Dict, List, Optional

DEFAULT_MAX_SAMPLES = 1000


class MetricSink(ABC):
    """Gauge vector keyed by a single label."""

    @abstractmethod
    def set_labeled_value(self, label_value: str, value: float) -> None:
        """
        Set the gauge for ``label_value``.

        Raises:
            SinkFailureError: If the backend rejects the update
        """


@dataclass
class GaugeSample:
    """A single gauge update."""

    timestamp: datetime
    label_value: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "label_value": self.label_value,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GaugeSample":
        """Create from dictionary."""
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            label_value=data["label_value"],
            value=data["value"],
        )


@dataclass
class RecordingGaugeSink(MetricSink):
    """
    In-memory sink that keeps recent updates and the current value per label.

    Only the last ``max_samples`` updates are kept; current values are never
    dropped.
    """

    name: str = "gauge"
    max_samples: int = DEFAULT_MAX_SAMPLES
    samples: Deque[GaugeSample] = field(init=False)
    values: Dict[str, float] = field(default_factory=dict)
    on_sample: Optional[Callable[[GaugeSample], None]] = None

    def __post_init__(self) -> None:
        self.samples = deque(maxlen=self.max_samples)

    def set_labeled_value(self, label_value: str, value: float) -> None:
        sample = GaugeSample(
            timestamp=datetime.now(), label_value=label_value, value=float(value)
        )
        self.samples.append(sample)
        self.values[label_value] = sample.value

        if self.on_sample:
            self.on_sample(sample)

    def value(self, label_value: str) -> Optional[float]:
        """Current value for a label, or None if it was never set."""
        return self.values.get(label_value)

    def calls(self) -> List[tuple]:
        """Kept updates as ``(label_value, value)`` pairs in call order."""
        return [(s.label_value, s.value) for s in self.samples]

    def clear_samples(self) -> None:
        """Forget recorded updates, keeping current values."""
        self.samples.clear()

    def to_dict(self) -> Dict[str, Any]:
        """Convert sink state to dictionary."""
        return {
            "name": self.name,
            "values": dict(self.values),
            "samples": [s.to_dict() for s in self.samples],
        }

    def save(self, filepath: Path) -> Path:
        """Save sink state to a JSON file.

        Args:
            filepath: Destination path

        Returns:
            Path where the state was saved
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        return filepath
