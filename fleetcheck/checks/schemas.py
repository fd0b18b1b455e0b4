"""
Schemas for nodes, their backing virtual machines, and check results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence


class Classification(str, Enum):
    """Outcome of interpreting one node's property value."""

    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


@dataclass(frozen=True)
class OptionValue:
    """A single key/value entry of a virtual machine's extra config."""

    key: str
    value: Any


# Ordered key/value pairs attached to one node's backing record
PropertyBag = Sequence[OptionValue]


@dataclass
class Node:
    """A cluster node."""

    name: str


@dataclass
class VirtualMachine:
    """The virtual machine backing a node."""

    name: str
    extra_config: List[OptionValue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, name: str, extra_config: Dict[str, Any]) -> "VirtualMachine":
        """Create from a plain key/value mapping, preserving its order."""
        return cls(
            name=name,
            extra_config=[OptionValue(key=k, value=v) for k, v in extra_config.items()],
        )


@dataclass
class NodeCheckFailure:
    """A check that raised while inspecting one node."""

    check_name: str
    node_name: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.check_name} failed for node {self.node_name}: {self.error}"


@dataclass
class CycleResult:
    """Summary of one check cycle across the fleet."""

    nodes_checked: int = 0
    node_failures: List[NodeCheckFailure] = field(default_factory=list)
    failed_checks: Dict[str, Exception] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        """True when every check ran for every node."""
        return not self.node_failures and not self.failed_checks

    def summary(self) -> str:
        """Generate a one-line summary of the cycle."""
        if self.succeeded:
            return f"✓ Checked {self.nodes_checked} nodes"
        return (
            f"✗ Checked {self.nodes_checked} nodes: "
            f"{len(self.node_failures)} node failures, "
            f"{len(self.failed_checks)} failed checks"
        )
