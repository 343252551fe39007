"""Graph package initialization.

Exposes core graph components and helpers for building workflows.
"""

from leadrecon.core.graph.base import END, START, Graph
from leadrecon.core.graph.batch import BatchResult, run_batch
from leadrecon.core.graph.engine import CompiledGraph, GraphRun
from leadrecon.core.graph.routing import route_by, wait_for_siblings
from leadrecon.core.graph.state import (
    NodeState,
    NodeStatus,
    StateUpdate,
    merge_artifacts,
    merge_state,
)
from leadrecon.core.graph.nodes.base.node import FunctionNode, Node, NodeContext

__all__ = [
    # Core classes
    "Graph",
    "CompiledGraph",
    "GraphRun",
    "Node",
    "FunctionNode",
    "NodeContext",
    "NodeState",
    "NodeStatus",
    "StateUpdate",
    "BatchResult",

    # Sentinels
    "START",
    "END",

    # Functions
    "merge_state",
    "merge_artifacts",
    "run_batch",
    "wait_for_siblings",
    "route_by",
]
