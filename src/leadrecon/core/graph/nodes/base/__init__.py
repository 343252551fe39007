"""Base node types."""

from leadrecon.core.graph.nodes.base.node import (
    FunctionNode,
    Node,
    NodeContext,
    NodeResult,
    coerce_update,
)

__all__ = ["FunctionNode", "Node", "NodeContext", "NodeResult", "coerce_update"]
