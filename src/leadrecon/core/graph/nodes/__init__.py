"""Node package initialization.

Exposes node types for building workflows.
"""

from leadrecon.core.graph.nodes.base.node import (
    FunctionNode,
    Node,
    NodeContext,
    NodeResult,
)

__all__ = [
    "Node",
    "FunctionNode",
    "NodeContext",
    "NodeResult",
]
