"""
Integration tests for the CBT check across several cycles.

Runs the check through CheckRunner into a Prometheus registry.
"""

import pytest
from prometheus_client import CollectorRegistry

from fleetcheck.checks import CheckRunner, Classification, CollectNodeCBT, Node, VirtualMachine, classify
from fleetcheck.metrics import RecordingGaugeSink, create_gauge_sink


def build_fleet(extra_configs):
    return [
        (Node(name=f"node-{i}"), VirtualMachine.from_dict(f"vm-{i}", extra))
        for i, extra in enumerate(extra_configs)
    ]


def uniform_fleet(enabled: int, disabled: int):
    return build_fleet(
        [{"ctkEnabled": "TRUE"}] * enabled + [{"ctkEnabled": "FALSE"}] * disabled
    )


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def runner(registry):
    return CheckRunner([CollectNodeCBT(create_gauge_sink(registry=registry))])


def gauge(registry, label):
    return registry.get_sample_value("vsphere_vm_cbt_checks", {"cbt": label})


class TestCBTCycles:
    """End-to-end CBT check cycles."""

    def test_mixed_fleet(self):
        """Test the mixed fleet scenario with a recording sink."""
        extra_configs = [{"ctkEnabled": "TRUE"}, {"ctkEnabled": "false"}, {}]
        fleet = build_fleet(extra_configs)
        sink = RecordingGaugeSink()
        check = CollectNodeCBT(sink)

        assert [classify(vm.extra_config, "ctkEnabled") for _, vm in fleet] == [
            Classification.ENABLED,
            Classification.DISABLED,
            Classification.DISABLED,
        ]

        CheckRunner([check]).run_cycle(fleet)

        assert check.last_result.counts == {"ENABLED": 1, "DISABLED": 2}
        assert check.last_result.mismatch is True
        calls = sink.calls()
        assert ("ENABLED", 1.0) in calls
        assert ("DISABLED", 2.0) in calls
        assert ("MISMATCH", 1.0) in calls

    def test_disabled_label_zeroed_after_fleet_converges(self, runner, registry):
        """Test that stale counts do not linger once every node is enabled."""
        runner.run_cycle(uniform_fleet(enabled=5, disabled=2))
        assert gauge(registry, "MISMATCH") == 1.0
        assert gauge(registry, "DISABLED") == 2.0

        runner.run_cycle(uniform_fleet(enabled=7, disabled=0))
        assert gauge(registry, "ENABLED") == 7.0
        assert gauge(registry, "DISABLED") == 0.0
        assert gauge(registry, "MISMATCH") == 0.0

        runner.run_cycle(uniform_fleet(enabled=7, disabled=0))
        assert gauge(registry, "ENABLED") == 7.0
        assert gauge(registry, "DISABLED") == 0.0
        assert gauge(registry, "MISMATCH") == 0.0

    def test_fleet_flips_back_and_forth(self, runner, registry):
        """Test alternating uniform fleets."""
        runner.run_cycle(uniform_fleet(enabled=3, disabled=0))
        runner.run_cycle(uniform_fleet(enabled=0, disabled=3))

        assert gauge(registry, "ENABLED") == 0.0
        assert gauge(registry, "DISABLED") == 3.0
        assert gauge(registry, "MISMATCH") == 0.0

        runner.run_cycle(uniform_fleet(enabled=3, disabled=0))

        assert gauge(registry, "ENABLED") == 3.0
        assert gauge(registry, "DISABLED") == 0.0

    def test_empty_fleet(self, runner, registry):
        """Test a cycle without nodes after a populated one."""
        runner.run_cycle(uniform_fleet(enabled=1, disabled=1))

        result = runner.run_cycle([])

        assert result.nodes_checked == 0
        assert gauge(registry, "ENABLED") == 0.0
        assert gauge(registry, "DISABLED") == 0.0
        assert gauge(registry, "MISMATCH") == 0.0
