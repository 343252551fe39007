"""Tests for router helpers and the soft-barrier fan-in."""

import asyncio

import pytest

from leadrecon.core.graph import END, START, Graph, NodeState, route_by, wait_for_siblings


def deck_writer(provider: str, delay: float = 0.0):
    async def fn(state):
        if delay:
            await asyncio.sleep(delay)
        return {"artifacts": {"deck": {"providers": {provider: {"id": provider}}}}}
    return fn


def fan_in_graph(mode_key: str = "mode", g_delay: float = 0.0, x_delay: float = 0.0):
    """A routes to B1 and/or B2, each of which waits for its sibling before C."""
    seen_by_c = []

    async def c(state):
        seen_by_c.append(sorted(state.get_artifact("deck.providers", {})))
        return {"artifacts": {"c": True}}

    def fan_out(state):
        return state.packet[mode_key] == "both"

    graph = Graph()
    graph.add_node("a", lambda state: None)
    graph.add_node("b1", deck_writer("google", g_delay))
    graph.add_node("b2", deck_writer("gamma", x_delay))
    graph.add_node("c", c)
    graph.add_edge(START, "a")
    graph.add_conditional_edges("a", route_by(
        lambda state: state.packet[mode_key],
        {"both": ["b1", "b2"], "google": ["b1"], "gamma": ["b2"]},
    ))
    graph.add_conditional_edges("b1", wait_for_siblings("c", ["deck.providers.gamma"], fan_out))
    graph.add_conditional_edges("b2", wait_for_siblings("c", ["deck.providers.google"], fan_out))
    graph.add_edge("c", END)
    return graph.compile(), seen_by_c


class TestWaitForSiblings:
    """Test the barrier router in isolation."""

    def test_waits_in_fan_out(self):
        router = wait_for_siblings("c", ["deck.providers.gamma"], lambda state: True)
        assert router(NodeState(artifacts={"deck": {"providers": {"google": {}}}})) == []
        assert router(NodeState(artifacts={"deck": {"providers": {"gamma": {}}}})) == ["c"]

    def test_bypass_without_fan_out(self):
        router = wait_for_siblings("c", ["deck.providers.gamma"], lambda state: False)
        assert router(NodeState()) == ["c"]

    def test_router_name(self):
        router = wait_for_siblings("c", ["deck.providers.gamma"], lambda state: True)
        assert router.__name__ == "wait_for_deck_providers_gamma"


class TestRouteBy:
    def test_table_lookup(self):
        router = route_by(lambda state: state.packet, {"x": ["a", "b"]})
        assert router(NodeState(packet="x")) == ["a", "b"]
        assert router(NodeState(packet="y")) == []


class TestFanIn:
    """C runs exactly once in fan-out, and still runs in single-branch mode."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("g_delay,x_delay", [(0.0, 0.05), (0.05, 0.0), (0.0, 0.0)])
    async def test_fan_out_convergence(self, g_delay, x_delay):
        graph, seen_by_c = fan_in_graph(g_delay=g_delay, x_delay=x_delay)
        run = await graph.run({"mode": "both"})
        assert run.executed("c") == 1
        assert seen_by_c == [["gamma", "google"]]
        assert run.wavefronts == [["a"], ["b1", "b2"], ["c"]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode,branch", [("google", "b1"), ("gamma", "b2")])
    async def test_fan_out_bypass(self, mode, branch):
        graph, seen_by_c = fan_in_graph()
        run = await graph.run({"mode": mode})
        assert run.wavefronts == [["a"], [branch], ["c"]]
        assert seen_by_c == [[mode]]

    @pytest.mark.asyncio
    async def test_gamma_absent_not_empty(self):
        graph, _ = fan_in_graph()
        state = await graph.invoke({"mode": "google"})
        assert "gamma" not in state.artifacts["deck"]["providers"]
