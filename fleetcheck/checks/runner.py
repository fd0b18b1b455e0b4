"""
In-process driver running node checks across a fleet, one cycle at a time.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from fleetcheck.checks.base import CheckContext, NodeCheck
from fleetcheck.checks.errors import CheckError
from fleetcheck.checks.schemas import CycleResult, Node, NodeCheckFailure, VirtualMachine
from fleetcheck.logging import CHECKS_COMPONENT, get_component_logger

log = get_component_logger(CHECKS_COMPONENT)


class CheckRunner:
    """
    Runs a collection of checks over every node of the cluster.

    A node that fails a check is skipped for that check only. A check whose
    ``start_check`` fails sits out the whole cycle.
    """

    def __init__(self, checks: Sequence[NodeCheck], context: Optional[CheckContext] = None):
        """
        Initialize runner.

        Args:
            checks: Checks to run every cycle
            context: Shared cycle context (reused across cycles)
        """
        self.checks: List[NodeCheck] = list(checks)
        self.context = context or CheckContext()
        self.cycles_run = 0

    def run_cycle(self, nodes: Iterable[Tuple[Node, VirtualMachine]]) -> CycleResult:
        """
        Run one full cycle.

        Args:
            nodes: ``(node, vm)`` pairs for every node of the cluster

        Returns:
            CycleResult summarising the cycle
        """
        result = CycleResult()
        self.context.cluster_info.start_cycle()

        active: List[NodeCheck] = []
        for check in self.checks:
            try:
                check.start_check()
            except CheckError as e:
                log.error(f"{check.name} failed to start: {e}")
                result.failed_checks[check.name] = e
                continue
            active.append(check)

        for node, vm in nodes:
            result.nodes_checked += 1
            for check in active:
                try:
                    check.check_node(self.context, node, vm)
                except CheckError as e:
                    log.warning(f"{check.name} skipped node {node.name}: {e}")
                    result.node_failures.append(
                        NodeCheckFailure(check_name=check.name, node_name=node.name, error=e)
                    )

        for check in active:
            try:
                check.finish_check(self.context)
            except CheckError as e:
                log.error(f"{check.name} failed to finish: {e}")
                result.failed_checks[check.name] = e

        self.cycles_run += 1
        log.info(f"Cycle {self.cycles_run}: {result.summary()}")
        return result
