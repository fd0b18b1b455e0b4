"""
Interface shared by node checks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from fleetcheck.checks.aggregator import ClusterInfo
from fleetcheck.checks.schemas import Node, VirtualMachine


@dataclass
class CheckContext:
    """State shared by every check during one cycle."""

    cluster_info: ClusterInfo = field(default_factory=ClusterInfo)


class NodeCheck(ABC):
    """
    A check run against every node of the cluster once per cycle.

    The driver calls ``start_check`` once, ``check_node`` for each node and
    ``finish_check`` once.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Check name used in logs and results."""

    @abstractmethod
    def start_check(self) -> None:
        """
        Prepare for a new cycle.

        Raises:
            CheckError: If the check cannot run this cycle
        """

    @abstractmethod
    def check_node(self, context: CheckContext, node: Node, vm: VirtualMachine) -> None:
        """
        Inspect one node.

        Raises:
            CheckError: If this node could not be checked; the driver skips
                the node and continues
        """

    @abstractmethod
    def finish_check(self, context: CheckContext) -> None:
        """Report the results of the cycle."""
