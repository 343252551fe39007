"""Tests for graph visualization."""

import pytest

from leadrecon.core.graph import END, START, Graph
from leadrecon.core.graph.viz import GraphVisualizer


async def noop(state):
    return None


@pytest.fixture
def graph():
    graph = Graph()
    for node_id in ("a", "b", "c", "d"):
        graph.add_node(node_id, noop)
    graph.add_edge(START, "a")
    graph.add_conditional_edges("a", lambda state: ["b", "c"], destinations=["b", "c"])
    graph.add_join_edge(["b", "c"], "d")
    graph.add_conditional_edges("d", lambda state: END)
    return graph.compile()


class TestGraphVisualizer:
    def test_render_graph(self, graph):
        mermaid = GraphVisualizer(graph).render_graph()
        assert mermaid.startswith("flowchart TD")
        assert f"{START} --> a" in mermaid
        assert "a -. <lambda> .-> b" in mermaid
        assert "b ==> d" in mermaid
        assert "%% d routes dynamically via <lambda>" in mermaid

    @pytest.mark.asyncio
    async def test_render_execution(self, graph):
        run = await graph.run(None, run_id="r1")
        table = GraphVisualizer(graph).render_execution(run)
        lines = table.splitlines()
        assert lines[0] == "run r1"
        assert lines[1] == "   1: a=completed"
        assert lines[2] == "   2: b=completed, c=completed"
        assert lines[3] == "   3: d=completed"
