"""Tests for bounded-concurrency batch runs."""

import asyncio

import pytest

from leadrecon.core.config import GraphConfig
from leadrecon.core.graph import START, Graph, run_batch


def tracked_graph(policy: str = "raise", limit: int = 2):
    """Graph whose single node records concurrency and fails for 'bad' packets."""
    stats = {"active": 0, "peak": 0}

    async def work(state):
        stats["active"] += 1
        stats["peak"] = max(stats["peak"], stats["active"])
        try:
            await asyncio.sleep(0.02)
            if state.packet.get("bad"):
                raise RuntimeError(f"bad packet {state.packet['eventId']}")
            return {"artifacts": {"done": state.packet["eventId"]}}
        finally:
            stats["active"] -= 1

    graph = Graph(config=GraphConfig(failure_policy=policy, max_concurrent_runs=limit))
    graph.add_node("work", work)
    graph.add_edge(START, "work")
    return graph.compile(), stats


class TestRunBatch:
    """Test batch execution."""

    @pytest.mark.asyncio
    async def test_results_in_input_order(self):
        graph, _ = tracked_graph()
        packets = [{"eventId": f"e{i}"} for i in range(5)]
        results = await run_batch(graph, packets)
        assert [r.event_id for r in results] == [f"e{i}" for i in range(5)]
        assert all(r.success for r in results)
        assert results[3].state.artifacts == {"done": "e3"}

    @pytest.mark.asyncio
    async def test_concurrency_bound_from_config(self):
        graph, stats = tracked_graph(limit=2)
        await run_batch(graph, [{"eventId": f"e{i}"} for i in range(6)])
        assert stats["peak"] == 2

    @pytest.mark.asyncio
    async def test_explicit_concurrency(self):
        graph, stats = tracked_graph(limit=4)
        await run_batch(graph, [{"eventId": f"e{i}"} for i in range(6)], max_concurrency=1)
        assert stats["peak"] == 1

    @pytest.mark.asyncio
    async def test_invalid_concurrency(self):
        graph, _ = tracked_graph()
        with pytest.raises(ValueError):
            await run_batch(graph, [], max_concurrency=-1)

    @pytest.mark.asyncio
    async def test_hard_failure_isolated(self):
        """One rejected run never cancels the others."""
        graph, _ = tracked_graph(policy="raise")
        packets = [{"eventId": "e0"}, {"eventId": "e1", "bad": True}, {"eventId": "e2"}]
        results = await run_batch(graph, packets)
        assert [r.success for r in results] == [True, False, True]
        assert "bad packet e1" in results[1].error
        assert results[1].state is None

    @pytest.mark.asyncio
    async def test_soft_failure_is_success(self):
        graph, _ = tracked_graph(policy="record")
        results = await run_batch(graph, [{"eventId": "e1", "bad": True}])
        assert results[0].success
        assert results[0].state.errors == ["work: RuntimeError: bad packet e1"]
