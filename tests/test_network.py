import logging
import math

import pytest

from hydronet.config import SimulationConfig
from hydronet.core.errors import DuplicateElementError
from hydronet.elements import Multisplit, Sink, Source, Split, Tap
from hydronet.network import Network
from hydronet.observers import RecordingObserver


def _names(obs: RecordingObserver) -> list[str]:
    return [r.name for r in obs.flows]


class TestRegistry:
    def test_insertion_order(self) -> None:
        net = Network()
        elems = [Sink("A"), Source("S"), Tap("T")]
        for e in elems:
            net.add_element(e)
        assert net.size() == 3
        assert len(net) == 3
        assert net.get_elements() == tuple(elems)
        assert [e.name for e in net] == ["A", "S", "T"]

    def test_lookup(self) -> None:
        net = Network()
        t = Tap("T")
        net.add_element(t)
        assert net.get_element("T") is t
        assert net.get_element("missing") is None
        assert "T" in net
        assert "missing" not in net

    def test_duplicate_names_rejected(self) -> None:
        net = Network()
        net.add_element(Tap("T"))
        with pytest.raises(DuplicateElementError):
            net.add_element(Sink("T"))
        assert net.size() == 1

    def test_get_elements_is_a_copy(self) -> None:
        net = Network()
        net.add_element(Tap("T"))
        elems = net.get_elements()
        net.add_element(Sink("A"))
        assert len(elems) == 1


class TestSimulate:
    def test_round_trip_chain(self, chain: Network, observer: RecordingObserver) -> None:
        chain.simulate(observer)
        assert chain.get_element("A").get_flow() == pytest.approx(10.0)
        assert _names(observer) == ["S", "T", "A"]

    def test_tee_scenario(self, tee: Network, observer: RecordingObserver) -> None:
        tee.simulate(observer)
        rec = observer.flow_of("X")
        assert rec.kind == "Split"
        assert rec.in_flow == pytest.approx(10.0)
        assert rec.out_flow == pytest.approx((5.0, 5.0))
        assert observer.flow_of("A").in_flow == pytest.approx(5.0)
        assert observer.flow_of("B").in_flow == pytest.approx(5.0)

    def test_reports_in_insertion_order_not_tree_order(self, observer: RecordingObserver) -> None:
        net = Network()
        s, t, k = Source("S"), Tap("T", is_open=True), Sink("K")
        for e in (k, t, s):
            net.add_element(e)
        s.set_flow(2.0)
        s.connect(t)
        t.connect(k)
        net.simulate(observer)
        assert _names(observer) == ["K", "T", "S"]
        assert observer.flow_of("K").in_flow == pytest.approx(2.0)

    def test_idempotent(self, tee: Network) -> None:
        first, second = RecordingObserver(), RecordingObserver()
        tee.simulate(first)
        tee.simulate(second)
        assert first.to_frame().equals(second.to_frame())

    def test_closed_tap_zero_downstream(self, observer: RecordingObserver) -> None:
        net = (
            Network.build()
            .add_source("S").with_flow(50.0)
            .link_to_tap("T").closed()
            .link_to_sink("A")
            .complete()
        )
        net.simulate(observer)
        assert observer.flow_of("T").in_flow == pytest.approx(50.0)
        assert observer.flow_of("T").out_flow == (0.0,)
        assert observer.flow_of("A").in_flow == 0.0

    def test_reflects_config_changes_between_runs(self, chain: Network, observer: RecordingObserver) -> None:
        chain.simulate(observer)
        chain.get_element("S").set_flow(4.0)
        observer.clear()
        chain.simulate(observer)
        assert observer.flow_of("A").in_flow == pytest.approx(4.0)

    def test_multiple_sources(self, observer: RecordingObserver) -> None:
        net = (
            Network.build()
            .add_source("S1").with_flow(1.0)
            .link_to_sink("A")
            .add_source("S2").with_flow(2.0)
            .link_to_sink("B")
            .complete()
        )
        net.simulate(observer)
        assert observer.flow_of("A").in_flow == pytest.approx(1.0)
        assert observer.flow_of("B").in_flow == pytest.approx(2.0)

    def test_multisplit_scenario(self, observer: RecordingObserver) -> None:
        net = (
            Network.build()
            .add_source("S").with_flow(100.0)
            .link_to_multisplit("M", 3).with_proportions([0.2, 0.3, 0.5])
            .with_outputs()
            .link_to_sink("A")
            .then()
            .link_to_sink("B")
            .then()
            .link_to_sink("C")
            .done()
            .complete()
        )
        net.simulate(observer)
        assert observer.flow_of("M").kind == "Split"
        assert observer.flow_of("M").out_flow == pytest.approx((20.0, 30.0, 50.0))
        assert [observer.flow_of(n).in_flow for n in "ABC"] == pytest.approx([20.0, 30.0, 50.0])


class TestMaxFlowCheck:
    @pytest.fixture()
    def net(self) -> Network:
        return (
            Network.build()
            .add_source("S").with_flow(8.0).max_flow(1.0)
            .link_to_tap("T").open().max_flow(5.0)
            .link_to_sink("A").max_flow(10.0)
            .complete()
        )

    def test_checked_simulation_reports_violation(self, net: Network, observer: RecordingObserver) -> None:
        net.simulate(observer, True)
        assert observer.error_names() == ["T"]
        err = observer.errors[0]
        assert (err.kind, err.in_flow, err.max_flow) == ("Tap", 8.0, 5.0)
        assert _names(observer) == ["S", "T", "A"]

    def test_unchecked_simulation_is_silent(self, net: Network, observer: RecordingObserver) -> None:
        net.simulate(observer)
        net.simulate(observer, False)
        assert observer.errors == []

    def test_config_enables_check_by_default(self, observer: RecordingObserver) -> None:
        net = (
            Network.build(SimulationConfig(check_max_flow=True))
            .add_source("S").with_flow(8.0)
            .link_to_sink("A").max_flow(5.0)
            .complete()
        )
        net.simulate(observer)
        assert observer.error_names() == ["A"]
        observer.clear()
        net.simulate(observer, enable_max_flow_check=False)
        assert observer.errors == []


class TestDeleteElement:
    def test_delete_tap_reconnects(self, chain: Network, observer: RecordingObserver) -> None:
        chain.simulate(observer)
        before = observer.flow_of("A").in_flow

        assert chain.delete_element("T")
        assert "T" not in chain
        assert chain.size() == 2
        assert chain.get_element("S").get_downstream() is chain.get_element("A")

        observer.clear()
        chain.simulate(observer)
        assert observer.flow_of("A").in_flow == pytest.approx(before)
        assert _names(observer) == ["S", "A"]

    def test_delete_split_with_two_outputs_rejected(self, tee: Network, caplog) -> None:
        x = tee.get_element("X")
        outputs = x.outputs
        with caplog.at_level(logging.WARNING, logger="hydronet.network"):
            assert not tee.delete_element("X")
        assert "X" in tee
        assert tee.size() == 4
        assert x.outputs == outputs
        assert x.upstream is tee.get_element("S")
        assert any("not deleted" in r.message for r in caplog.records)

    def test_delete_split_after_branch_removed(self, tee: Network, observer: RecordingObserver) -> None:
        assert tee.delete_element("A")
        assert tee.delete_element("X")
        assert tee.get_element("S").get_downstream() is tee.get_element("B")
        tee.simulate(observer)
        assert observer.flow_of("B").in_flow == pytest.approx(10.0)

    def test_delete_sink_clears_split_slot(self, tee: Network) -> None:
        assert tee.delete_element("B")
        assert tee.get_element("X").outputs == (tee.get_element("A"), None)

    def test_delete_source(self, chain: Network, observer: RecordingObserver) -> None:
        chain.simulate(observer)
        assert chain.delete_element("S")
        assert chain.get_element("T").upstream is None
        observer.clear()
        chain.simulate(observer)
        assert _names(observer) == ["T", "A"]
        assert math.isnan(observer.flow_of("A").in_flow)

    def test_delete_unknown_name(self, chain: Network, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="hydronet.network"):
            assert not chain.delete_element("nope")
        assert chain.size() == 3
        assert any("no such element" in r.message for r in caplog.records)


class TestValidate:
    def test_built_networks_are_valid(self, chain: Network, tee: Network) -> None:
        assert chain.validate() == []
        assert tee.validate() == []

    def test_orphan_non_source(self) -> None:
        net = Network()
        net.add_element(Sink("A"))
        issues = net.validate()
        assert len(issues) == 1
        assert "not a source" in issues[0]

    def test_bad_proportions(self) -> None:
        net = (
            Network.build()
            .add_source("S").with_flow(1.0)
            .link_to_multisplit("M", 2).with_proportions([0.5, 0.6])
            .complete()
        )
        assert any("proportions" in i for i in net.validate())

    def test_unregistered_neighbour(self) -> None:
        net = Network()
        s = Source("S")
        net.add_element(s)
        s.connect(Sink("ghost"))
        assert any("outside the network" in i for i in net.validate())

    def test_cycle_detected(self) -> None:
        net = Network()
        a, b = Tap("A"), Tap("B")
        net.add_element(a)
        net.add_element(b)
        a.set_downstream(b)
        b.set_upstream(a)
        b.set_downstream(a)
        a.set_upstream(b)
        issues = net.validate()
        assert any("not reachable" in i for i in issues)

    def test_split_shared_child(self) -> None:
        net = Network()
        s, x, k = Source("S"), Split("X"), Sink("K")
        for e in (s, x, k):
            net.add_element(e)
        s.connect(x)
        x.connect(k, 0)
        x.set_downstream(k, 1)
        assert any("reachable more than once" in i for i in net.validate())


def test_multisplit_is_registered_in_order():
    net = Network()
    m = Multisplit("M", 2)
    net.add_element(m)
    assert net.get_elements() == (m,)
