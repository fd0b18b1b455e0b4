"""
Changed block tracking (CBT) consistency check.

Reports how many nodes have ``ctkEnabled`` set on their virtual machine
and whether the setting differs across the cluster.
"""

from typing import Optional

from fleetcheck.checks.aggregator import CycleAggregator, CycleState
from fleetcheck.checks.base import CheckContext, NodeCheck
from fleetcheck.checks.errors import LifecycleViolationError
from fleetcheck.checks.extractor import extract
from fleetcheck.checks.reporter import Reporter, ReportResult, StaleLabelTracker
from fleetcheck.checks.schemas import Classification, Node, VirtualMachine
from fleetcheck.config import CheckConfig, MetricsConfig
from fleetcheck.logging import CHECKS_COMPONENT, get_component_logger
from fleetcheck.metrics.sink import MetricSink

log = get_component_logger(CHECKS_COMPONENT)

CBT_PROPERTY = "ctkEnabled"


class CollectNodeCBT(NodeCheck):
    """
    Emits the CBT configuration of every node's virtual machine.

    Each cycle starts at ``start_check``. The first ``check_node`` or
    ``finish_check`` of the cycle joins the context's aggregator for the
    property, starting a new count unless another check on the same
    property already did.
    """

    def __init__(
        self,
        sink: MetricSink,
        check_config: Optional[CheckConfig] = None,
        metrics_config: Optional[MetricsConfig] = None,
    ):
        """
        Initialize the check.

        Args:
            sink: Gauge vector the counts are reported into
            check_config: Property key and classification options
            metrics_config: Mismatch label
        """
        self.check_config = check_config or CheckConfig(property_key=CBT_PROPERTY)
        metrics_config = metrics_config or MetricsConfig()

        initial_labels = (
            [c.value for c in Classification] if self.check_config.seed_labels else []
        )
        self.reporter = Reporter(
            sink,
            mismatch_label=metrics_config.mismatch_label,
            tracker=StaleLabelTracker(initial_labels),
        )
        self.last_result: Optional[ReportResult] = None
        self._state = CycleState.IDLE
        self._joined = False

    @property
    def name(self) -> str:
        return "CollectNodeCBT"

    @property
    def property_key(self) -> str:
        return self.check_config.property_key

    def start_check(self) -> None:
        if self._state == CycleState.ACCUMULATING:
            log.warning(f"{self.name} restarted before finishing the previous cycle")
        self._state = CycleState.ACCUMULATING
        self._joined = False

    def check_node(self, context: CheckContext, node: Node, vm: VirtualMachine) -> None:
        self._require_started("check_node")
        log.trace(f"Checking {self.property_key} property")

        aggregator = self._join(context)
        match = extract(vm.extra_config, self.property_key, strict=self.check_config.strict)
        if match.found:
            log.trace(
                f"Found {self.property_key} property for node {node.name} "
                f"with value {match.value}"
            )
        else:
            log.trace(f"Property not found for node {node.name}")

        aggregator.record(match.classification, entity=node.name)

    def finish_check(self, context: CheckContext) -> None:
        self._require_started("finish_check")
        counts = self._join(context).snapshot()
        self._state = CycleState.REPORTED
        self.last_result = self.reporter.report(counts)

    def _join(self, context: CheckContext) -> CycleAggregator:
        aggregator = context.cluster_info.aggregator(self.property_key)
        if not self._joined:
            # A closed aggregator belongs to a previous cycle of this context
            if aggregator.state != CycleState.ACCUMULATING:
                aggregator.reset()
            self._joined = True
        return aggregator

    def _require_started(self, operation: str) -> None:
        if self._state != CycleState.ACCUMULATING:
            raise LifecycleViolationError(
                f"{self.name} cannot {operation} while check is {self._state.value}",
                operation=operation,
                state=self._state.value,
            )
