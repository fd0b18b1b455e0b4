"""
Node property checks.

Classifies a property of every node, aggregates the classifications per
cycle and reports them as gauge values.
"""

from fleetcheck.checks.aggregator import (
    ClusterInfo,
    CycleAggregator,
    CycleCounts,
    CycleState,
)
from fleetcheck.checks.base import CheckContext, NodeCheck
from fleetcheck.checks.errors import (
    CheckError,
    ClassificationError,
    LifecycleViolationError,
    SinkFailureError,
)
from fleetcheck.checks.extractor import (
    PropertyMatch,
    classify,
    classify_value,
    extract,
    find_property,
)
from fleetcheck.checks.node_cbt import CBT_PROPERTY, CollectNodeCBT
from fleetcheck.checks.reporter import (
    MISMATCH_LABEL,
    Reporter,
    ReportResult,
    StaleLabelTracker,
    has_mismatch,
)
from fleetcheck.checks.runner import CheckRunner
from fleetcheck.checks.schemas import (
    Classification,
    CycleResult,
    Node,
    NodeCheckFailure,
    OptionValue,
    PropertyBag,
    VirtualMachine,
)

__all__ = [
    # Aggregation
    "ClusterInfo",
    "CycleAggregator",
    "CycleCounts",
    "CycleState",
    # Interface
    "CheckContext",
    "NodeCheck",
    "CheckRunner",
    # Errors
    "CheckError",
    "ClassificationError",
    "LifecycleViolationError",
    "SinkFailureError",
    # Extraction
    "PropertyMatch",
    "classify",
    "classify_value",
    "extract",
    "find_property",
    # Checks
    "CBT_PROPERTY",
    "CollectNodeCBT",
    # Reporting
    "MISMATCH_LABEL",
    "Reporter",
    "ReportResult",
    "StaleLabelTracker",
    "has_mismatch",
    # Schemas
    "Classification",
    "CycleResult",
    "Node",
    "NodeCheckFailure",
    "OptionValue",
    "PropertyBag",
    "VirtualMachine",
]
