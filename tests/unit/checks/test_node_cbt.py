"""Tests for the CBT node check."""

import pytest

from fleetcheck.checks import (
    CheckContext,
    ClassificationError,
    Classification,
    CollectNodeCBT,
    LifecycleViolationError,
    Node,
    NodeCheck,
    VirtualMachine,
)
from fleetcheck.config import CheckConfig, MetricsConfig
from fleetcheck.metrics import RecordingGaugeSink


def make_node(name: str, **extra_config):
    return Node(name=name), VirtualMachine.from_dict(f"{name}-vm", extra_config)


def run_cycle(check, context, *nodes):
    """Drive one cycle through the three lifecycle calls."""
    check.start_check()
    for node, vm in nodes:
        check.check_node(context, node, vm)
    check.finish_check(context)


@pytest.fixture
def sink():
    return RecordingGaugeSink()


@pytest.fixture
def context():
    return CheckContext()


class TestCollectNodeCBT:
    """Tests for CollectNodeCBT."""

    def test_is_a_node_check(self, sink):
        """Test that the check implements the NodeCheck interface."""
        check = CollectNodeCBT(sink)

        assert isinstance(check, NodeCheck)
        assert check.name == "CollectNodeCBT"
        assert check.property_key == "ctkEnabled"

    def test_lifecycle_over_fresh_context(self, sink, context):
        """Test the three calls made directly on a new context."""
        check = CollectNodeCBT(sink)
        check.start_check()

        check.check_node(context, *make_node("a", ctkEnabled="TRUE"))
        check.check_node(context, *make_node("b"))

        aggregator = context.cluster_info.aggregator("ctkEnabled")
        assert aggregator.count(Classification.ENABLED) == 1
        assert aggregator.count(Classification.DISABLED) == 1

        check.finish_check(context)

        assert sink.values == {"MISMATCH": 1.0, "ENABLED": 1.0, "DISABLED": 1.0}

    def test_fresh_context_per_cycle(self, sink):
        """Test a driver that builds a new context every cycle."""
        check = CollectNodeCBT(sink)

        run_cycle(check, CheckContext(), make_node("a", ctkEnabled="true"), make_node("b"))
        run_cycle(check, CheckContext(), make_node("a", ctkEnabled="true"))

        assert sink.values == {"MISMATCH": 0.0, "ENABLED": 1.0, "DISABLED": 0.0}

    def test_reused_context_starts_fresh_counts(self, sink, context):
        """Test a driver that reuses one context across cycles."""
        check = CollectNodeCBT(sink)

        run_cycle(check, context, make_node("a", ctkEnabled="true"), make_node("b"))
        run_cycle(check, context, make_node("a", ctkEnabled="true"))

        assert check.last_result.counts == {"ENABLED": 1}
        assert sink.values == {"MISMATCH": 0.0, "ENABLED": 1.0, "DISABLED": 0.0}

    def test_reused_context_empty_cycle(self, sink, context):
        """Test that a cycle without nodes does not report stale counts."""
        check = CollectNodeCBT(sink)
        run_cycle(check, context, make_node("a", ctkEnabled="true"))

        run_cycle(check, context)

        assert check.last_result.counts == {}
        assert sink.values == {"MISMATCH": 0.0, "ENABLED": 0.0}

    def test_finish_check_reports(self, sink, context):
        """Test that finishing the cycle emits the gauges."""
        check = CollectNodeCBT(sink)

        run_cycle(
            check,
            context,
            make_node("a", ctkEnabled="true"),
            make_node("b", ctkEnabled="true"),
        )

        assert sink.values == {"MISMATCH": 0.0, "ENABLED": 2.0}
        assert check.last_result is not None
        assert check.last_result.mismatch is False

    def test_custom_property_key(self, sink, context):
        """Test checking a different property."""
        check = CollectNodeCBT(sink, check_config=CheckConfig(property_key="vhv.enable"))

        run_cycle(
            check,
            context,
            make_node("a", **{"vhv.enable": "TRUE"}),
            make_node("b", ctkEnabled="TRUE"),
        )

        assert sink.values == {"MISMATCH": 1.0, "ENABLED": 1.0, "DISABLED": 1.0}

    def test_strict_check_rejects_node(self, sink, context):
        """Test that strict mode raises for the offending node only."""
        check = CollectNodeCBT(sink, check_config=CheckConfig(strict=True))
        check.start_check()

        with pytest.raises(ClassificationError):
            check.check_node(context, *make_node("a", ctkEnabled="sometimes"))

        assert context.cluster_info.aggregator("ctkEnabled").total == 0

    def test_seed_labels(self, sink, context):
        """Test that seeded labels are exported as zero."""
        check = CollectNodeCBT(sink, check_config=CheckConfig(seed_labels=True))

        run_cycle(check, context, make_node("a", ctkEnabled="true"))

        assert sink.values["DISABLED"] == 0.0

    def test_mismatch_label_from_config(self, sink, context):
        """Test the configured mismatch label value."""
        check = CollectNodeCBT(sink, metrics_config=MetricsConfig(mismatch_label="SPLIT"))

        run_cycle(check, context)

        assert sink.values == {"SPLIT": 0.0}

    def test_check_node_before_start_is_rejected(self, sink, context):
        """Test that nodes cannot be checked before start_check."""
        check = CollectNodeCBT(sink)

        with pytest.raises(LifecycleViolationError) as exc_info:
            check.check_node(context, *make_node("a", ctkEnabled="true"))

        assert exc_info.value.operation == "check_node"
        assert exc_info.value.state == "idle"

    def test_finish_twice_is_rejected(self, sink, context):
        """Test that a cycle is reported only once."""
        check = CollectNodeCBT(sink)
        run_cycle(check, context)

        with pytest.raises(LifecycleViolationError) as exc_info:
            check.finish_check(context)

        assert exc_info.value.state == "reported"

    def test_check_node_after_finish_is_rejected(self, sink, context):
        """Test that a reported cycle accepts no more nodes."""
        check = CollectNodeCBT(sink)
        run_cycle(check, context)

        with pytest.raises(LifecycleViolationError):
            check.check_node(context, *make_node("a", ctkEnabled="true"))


class TestSharedAggregation:
    """Tests for checks sharing one property's aggregation point."""

    def test_two_checks_count_each_node_once(self, context):
        """Test that counts are not doubled and both checks report."""
        first_sink, second_sink = RecordingGaugeSink(), RecordingGaugeSink()
        first, second = CollectNodeCBT(first_sink), CollectNodeCBT(second_sink)
        nodes = [make_node("a", ctkEnabled="true"), make_node("b")]

        for check in (first, second):
            check.start_check()
        for node, vm in nodes:
            for check in (first, second):
                check.check_node(context, node, vm)
        for check in (first, second):
            check.finish_check(context)

        expected = {"MISMATCH": 1.0, "ENABLED": 1.0, "DISABLED": 1.0}
        assert first_sink.values == expected
        assert second_sink.values == expected

    def test_shared_checks_over_reused_context(self, context):
        """Test that sharing checks start the next cycle together."""
        first_sink, second_sink = RecordingGaugeSink(), RecordingGaugeSink()
        checks = [CollectNodeCBT(first_sink), CollectNodeCBT(second_sink)]

        for fleet in ([make_node("a", ctkEnabled="true")], [make_node("a")]):
            for check in checks:
                check.start_check()
            for node, vm in fleet:
                for check in checks:
                    check.check_node(context, node, vm)
            for check in checks:
                check.finish_check(context)

        expected = {"MISMATCH": 0.0, "ENABLED": 0.0, "DISABLED": 1.0}
        assert first_sink.values == expected
        assert second_sink.values == expected
