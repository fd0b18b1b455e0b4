"""
Cycle-scoped aggregation of node classifications.
"""

from enum import Enum
from typing import Dict, Iterator, Optional, Set

from fleetcheck.checks.errors import LifecycleViolationError
from fleetcheck.checks.schemas import Classification
from fleetcheck.logging import CHECKS_COMPONENT, get_component_logger

log = get_component_logger(CHECKS_COMPONENT)

CycleCounts = Dict[Classification, int]


class CycleState(str, Enum):
    """Lifecycle of one aggregation cycle."""

    IDLE = "idle"
    ACCUMULATING = "accumulating"
    REPORTED = "reported"


class CycleAggregator:
    """
    Counts classifications across the nodes of one cycle.

    Workflow:
    1. ``reset()`` once at cycle start
    2. ``record()`` once per node
    3. ``snapshot()`` at cycle end, by every check reading the counts

    The first snapshot closes the cycle; later snapshots return the same
    counts. A node recorded twice under the same name is counted once, so
    checks sharing a property key do not double count.

    Calls are expected from a single driver thread. A driver that checks
    nodes in parallel must serialize ``record``.
    """

    def __init__(self) -> None:
        self._counts: CycleCounts = {}
        self._entities: Set[str] = set()
        self._state = CycleState.IDLE

    @property
    def state(self) -> CycleState:
        return self._state

    def reset(self) -> None:
        """Clear all counts and start a new cycle."""
        if self._state == CycleState.ACCUMULATING and self._counts:
            log.warning(
                f"Resetting an unreported cycle with {self.total} recorded nodes"
            )
        self._counts = {}
        self._entities = set()
        self._state = CycleState.ACCUMULATING

    def record(self, classification: Classification, entity: Optional[str] = None) -> int:
        """
        Count one node's classification.

        Args:
            classification: The node's classification
            entity: Node name; a name already recorded this cycle is ignored

        Returns:
            Count for the classification after recording

        Raises:
            LifecycleViolationError: If the cycle was not started or was
                already reported
        """
        self._require("record", CycleState.ACCUMULATING)
        if entity is not None:
            if entity in self._entities:
                return self.count(classification)
            self._entities.add(entity)
        self._counts[classification] = self._counts.get(classification, 0) + 1
        return self._counts[classification]

    def snapshot(self) -> CycleCounts:
        """
        Return a copy of the counts and close the cycle for recording.

        Raises:
            LifecycleViolationError: If no cycle was started
        """
        self._require("snapshot", CycleState.ACCUMULATING, CycleState.REPORTED)
        self._state = CycleState.REPORTED
        return dict(self._counts)

    def count(self, classification: Classification) -> int:
        return self._counts.get(classification, 0)

    @property
    def total(self) -> int:
        """Number of nodes recorded since the last reset."""
        return sum(self._counts.values())

    def __iter__(self) -> Iterator[Classification]:
        return iter(self._counts)

    def _require(self, operation: str, *states: CycleState) -> None:
        if self._state not in states:
            raise LifecycleViolationError(
                f"Cannot {operation} while cycle is {self._state.value}",
                operation=operation,
                state=self._state.value,
            )


class ClusterInfo:
    """
    Aggregation points shared by the checks of one cycle, keyed by property.

    Checks inspecting the same property share one aggregator. A fresh
    ClusterInfo is a fresh cycle: its aggregators start accumulating.
    """

    def __init__(self) -> None:
        self._aggregators: Dict[str, CycleAggregator] = {}

    def start_cycle(self) -> None:
        """Reset every aggregator for a new cycle."""
        for aggregator in self._aggregators.values():
            aggregator.reset()

    def aggregator(self, key: str) -> CycleAggregator:
        """Get the aggregator for a property, creating it on first use."""
        if key not in self._aggregators:
            aggregator = CycleAggregator()
            aggregator.reset()
            self._aggregators[key] = aggregator
        return self._aggregators[key]

    def keys(self) -> Iterator[str]:
        return iter(self._aggregators)
