"""Graph Base Classes

This module defines the builder side of the graph system. A Graph collects:
1. Nodes, keyed by id
2. Fixed edges (always go from A to B), including entry edges from START
3. Conditional edges (a pure router inspecting state and naming the next nodes)
4. Join edges (activate a target once every activated source has finished)

``compile()`` validates the definition and freezes it into a CompiledGraph that
the execution engine drives.

Example:
    ```python
    graph = Graph()
    graph.add_node("profiler", profile)
    graph.add_node(GoogleDeckNode(id="deck_google", ...))
    graph.add_node("funnel", build_funnel)

    graph.add_edge(START, "profiler")
    graph.add_conditional_edges("profiler", pick_decks)
    graph.add_edge("deck_google", "funnel")
    graph.add_edge("funnel", END)

    compiled = graph.compile()
    final_state = await compiled.invoke(NodeState.initial(packet))
    ```
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from leadrecon.core.config import GraphConfig
from leadrecon.core.errors import GraphCompileError
from leadrecon.core.logging import LogComponent, LeadReconLoggingConfig, get_logger
from leadrecon.core.graph.state import NodeState
from leadrecon.core.graph.nodes.base.node import FunctionNode, Node

START = "__start__"
END = "__end__"

Router = Callable[[NodeState], Union[str, Sequence[str], None]]


class ConditionalEdge(BaseModel):
    """A router evaluated once each time ``source`` completes."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: str
    router: Callable[..., Any]
    destinations: Optional[Tuple[str, ...]] = None


class JoinEdge(BaseModel):
    """Fan-in edge: ``target`` waits for every activated source."""
    model_config = ConfigDict(frozen=True)

    sources: Tuple[str, ...]
    target: str


class Graph(BaseModel):
    """A directed graph definition for orchestrating event workflows.

    Attributes:
        nodes: Dictionary mapping node IDs to Node instances
        edges: Fixed (source, target) pairs; ``START`` sources are entry edges
        conditional_edges: Routers keyed by source node
        join_edges: Explicit fan-in edges
        config: Engine configuration used when ``compile`` gets none
        logging_config: Controls logging verbosity of compiled runs
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    nodes: Dict[str, Node] = Field(default_factory=dict)
    edges: List[Tuple[str, str]] = Field(default_factory=list)
    conditional_edges: List[ConditionalEdge] = Field(default_factory=list)
    join_edges: List[JoinEdge] = Field(default_factory=list)
    config: GraphConfig = Field(default_factory=GraphConfig)
    logging_config: LeadReconLoggingConfig = Field(default_factory=LeadReconLoggingConfig)
    _logger: logging.Logger = PrivateAttr()

    def __init__(self, **data):
        super().__init__(**data)
        self._logger = get_logger(LogComponent.GRAPH)

    def add_node(self, node: Union[Node, str], fn: Optional[Callable[..., Any]] = None) -> Node:
        """Register a node with the graph.

        Args:
            node: Node instance, or the id to register ``fn`` under
            fn: Async callable ``fn(state)`` or ``fn(state, context)``

        Returns:
            The registered Node

        Raises:
            ValueError: Reserved or duplicate id, or a missing callable
        """
        if isinstance(node, str):
            if fn is None:
                raise ValueError(f"Node {node} registered without a callable")
            node = FunctionNode(id=node, fn=fn)
        elif fn is not None:
            raise ValueError("Pass either a Node instance or an id and a callable")

        if node.id in (START, END):
            raise ValueError(f"Node id {node.id} is reserved")
        if node.id in self.nodes:
            raise ValueError(f"Node already registered: {node.id}")

        self.nodes[node.id] = node
        self._logger.debug(f"Added node: {node.id} of type {type(node).__name__}")
        return node

    def add_edge(self, source: str, target: str) -> None:
        """Add a fixed edge. ``START`` as source marks an entry node."""
        self.edges.append((source, target))
        self._logger.debug(f"Added edge: {source} --> {target}")

    def set_entry_point(self, node_id: str) -> None:
        """Mark a node as part of the initial wavefront."""
        self.add_edge(START, node_id)

    def add_conditional_edges(
        self,
        source: str,
        router: Router,
        destinations: Optional[Sequence[str]] = None
    ) -> None:
        """Add a router evaluated after ``source`` completes.

        Args:
            source: Node whose completion triggers the router
            router: Pure function of state returning next node ids (or none)
            destinations: Optional declaration of every id the router may
                return; checked at compile time and at run time
        """
        self.conditional_edges.append(ConditionalEdge(
            source=source,
            router=router,
            destinations=tuple(destinations) if destinations is not None else None,
        ))
        self._logger.debug(f"Added conditional edge from {source}")

    def add_join_edge(self, sources: Sequence[str], target: str) -> None:
        """Activate ``target`` once every activated source has finished."""
        if not sources:
            raise ValueError("A join edge needs at least one source")
        self.join_edges.append(JoinEdge(sources=tuple(sources), target=target))
        self._logger.debug(f"Added join edge: {list(sources)} ==> {target}")

    def chain(self, node_ids: Sequence[str]) -> None:
        """Connect a sequence of registered nodes with fixed edges."""
        for source, target in zip(node_ids, node_ids[1:]):
            self.add_edge(source, target)

    def validate(self) -> List[str]:
        """Validate the graph definition.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors: List[str] = []

        def check(node_id: str, source: str, target: str) -> None:
            if node_id not in self.nodes:
                errors.append(f"unknown node '{node_id}' referenced by edge {source} -> {target}")

        for source, target in self.edges:
            if source == END:
                errors.append(f"edge {source} -> {target} leaves the end sentinel")
            elif source != START:
                check(source, source, target)
            if target == START:
                errors.append(f"edge {source} -> {target} enters the start sentinel")
            elif target != END:
                check(target, source, target)

        for edge in self.conditional_edges:
            check(edge.source, edge.source, "<router>")
            for target in edge.destinations or ():
                if target != END:
                    check(target, edge.source, target)

        for join in self.join_edges:
            label = "+".join(join.sources)
            for source in join.sources:
                check(source, label, join.target)
            check(join.target, label, join.target)

        if not any(source == START for source, _ in self.edges):
            errors.append("graph has no start node")

        return errors

    def compile(self, config: Optional[GraphConfig] = None) -> "CompiledGraph":
        """Validate and freeze the graph.

        Raises:
            GraphCompileError: If validation fails
        """
        problems = self.validate()
        if problems:
            raise GraphCompileError(problems)

        from leadrecon.core.graph.engine import CompiledGraph

        compiled = CompiledGraph(
            nodes=self.nodes,
            edges=self.edges,
            conditional_edges=self.conditional_edges,
            join_edges=self.join_edges,
            config=config or self.config,
            logging_config=self.logging_config,
        )
        self._logger.info(
            f"Compiled graph: {len(self.nodes)} nodes, entry {list(compiled.entry_nodes)}"
        )
        return compiled
