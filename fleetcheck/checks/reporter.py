"""
End-of-cycle reporting of classification counts.

A gauge vector whose label set changes from cycle to cycle keeps the last
value of every label it was ever given. The reporter therefore remembers
every label it has emitted and sets the ones missing from the current
cycle back to zero, every cycle they stay missing.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from fleetcheck.checks.errors import SinkFailureError
from fleetcheck.checks.schemas import Classification
from fleetcheck.logging import CHECKS_COMPONENT, get_component_logger
from fleetcheck.metrics.sink import MetricSink

log = get_component_logger(CHECKS_COMPONENT)

MISMATCH_LABEL = "MISMATCH"


class StaleLabelTracker:
    """
    Remembers which labels were emitted and which went stale.

    Each cycle: ``begin()`` clears every mark, ``mark()`` flags the labels
    set this cycle, and ``stale_labels()`` lists the known labels left
    unmarked. Labels are never forgotten.
    """

    def __init__(self, initial_labels: Iterable[str] = ()):
        self._emitted: Dict[str, bool] = {label: False for label in initial_labels}

    def begin(self) -> None:
        """Start a new cycle with every known label unmarked."""
        for label in self._emitted:
            self._emitted[label] = False

    def mark(self, label: str) -> None:
        """Record that ``label`` was emitted this cycle."""
        self._emitted[label] = True

    def stale_labels(self) -> List[str]:
        """Known labels not emitted this cycle, in first-seen order."""
        return [label for label, emitted in self._emitted.items() if not emitted]

    def is_emitted(self, label: str) -> bool:
        return self._emitted.get(label, False)

    @property
    def known_labels(self) -> List[str]:
        return list(self._emitted)


@dataclass
class ReportResult:
    """Outcome of one report pass."""

    mismatch: bool
    counts: Dict[str, int]
    zeroed_labels: List[str] = field(default_factory=list)
    failures: List[SinkFailureError] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when the sink accepted every update."""
        return not self.failures


def has_mismatch(counts: Mapping[Classification, int]) -> bool:
    """True iff at least two classifications have a positive count."""
    return sum(1 for count in counts.values() if count > 0) > 1


class Reporter:
    """
    Emits the mismatch signal and per-classification counts to a sink.

    The sink is injected once; the tracker persists across cycles.
    """

    def __init__(
        self,
        sink: MetricSink,
        mismatch_label: str = MISMATCH_LABEL,
        tracker: Optional[StaleLabelTracker] = None,
    ):
        """
        Initialize reporter.

        Args:
            sink: Gauge vector to report into
            mismatch_label: Label value of the mismatch series
            tracker: Emitted label memory (a fresh one by default)
        """
        self.sink = sink
        self.mismatch_label = mismatch_label
        self.tracker = tracker or StaleLabelTracker()

    def report(self, counts: Mapping[Classification, int]) -> ReportResult:
        """
        Report one cycle's counts.

        Every update is attempted; sink failures are logged and returned
        in the result.

        Args:
            counts: Classification counts of the finished cycle

        Returns:
            ReportResult with the mismatch decision and any failures
        """
        mismatch = has_mismatch(counts)
        emitted = {_label(c): n for c, n in counts.items() if n > 0}
        result = ReportResult(mismatch=mismatch, counts=emitted)

        log.debug(
            f"Enabled ({counts.get(Classification.ENABLED, 0)}) "
            f"Disabled ({counts.get(Classification.DISABLED, 0)}) "
            f"mismatch={mismatch}"
        )
        self._set(result, self.mismatch_label, 1.0 if mismatch else 0.0)

        self.tracker.begin()
        for label, count in emitted.items():
            log.debug(f"{label}: {count}")
            self._set(result, label, float(count))
            self.tracker.mark(label)

        for label in self.tracker.stale_labels():
            self._set(result, label, 0.0)
            result.zeroed_labels.append(label)

        if result.zeroed_labels:
            log.debug(f"Zeroed stale labels: {', '.join(result.zeroed_labels)}")
        return result

    def _set(self, result: ReportResult, label: str, value: float) -> None:
        try:
            self.sink.set_labeled_value(label, value)
        except SinkFailureError as e:
            log.error(f"Gauge update {label}={value} failed: {e}")
            result.failures.append(e)


def _label(classification: Classification) -> str:
    if isinstance(classification, Classification):
        return classification.value
    return str(classification)
