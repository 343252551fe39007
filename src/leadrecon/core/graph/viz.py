"""Graph visualization tools."""

from typing import List

from leadrecon.core.graph.base import END, START
from leadrecon.core.graph.engine import CompiledGraph, GraphRun


class GraphVisualizer:
    """Visualize graph structure and execution."""

    def __init__(self, graph: CompiledGraph):
        self.graph = graph

    def render_graph(self) -> str:
        """Mermaid flowchart of the compiled graph.

        Fixed edges are solid, router edges dotted (labelled with declared
        destinations when present) and join edges thick.
        """
        lines: List[str] = ["flowchart TD", f"    {START}([start])", f"    {END}([end])"]
        for node_id in self.graph.nodes:
            lines.append(f"    {node_id}[{node_id}]")
        for node_id in self.graph.entry_nodes:
            lines.append(f"    {START} --> {node_id}")
        for source, targets in self.graph.edges.items():
            for target in targets:
                lines.append(f"    {source} --> {target}")
        for source, routers in self.graph.conditional_edges.items():
            for edge in routers:
                name = getattr(edge.router, "__name__", "router")
                for target in edge.destinations or ():
                    lines.append(f"    {source} -. {name} .-> {target}")
                if not edge.destinations:
                    lines.append(f"    %% {source} routes dynamically via {name}")
        for join in self.graph.join_edges:
            for source in join.sources:
                lines.append(f"    {source} ==> {join.target}")
        return "\n".join(lines)

    def render_execution(self, run: GraphRun) -> str:
        """One line per wavefront with the status of each node in it."""
        lines = [f"run {run.run_id}"]
        for index, wavefront in enumerate(run.wavefronts, start=1):
            cells = ", ".join(f"{node_id}={run.status[node_id].value}" for node_id in wavefront)
            lines.append(f"  {index:>2}: {cells}")
        if run.state is not None and run.state.errors:
            lines.append(f"  errors: {len(run.state.errors)}")
        return "\n".join(lines)
