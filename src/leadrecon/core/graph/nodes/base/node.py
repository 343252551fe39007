"""Base node class for the graph system.

This module defines the Node abstraction for the Graph framework. A Node represents
an individual unit of work (an LLM call, an upload, a payment API call) executed
within a larger workflow. Nodes are validated via Pydantic and are asynchronous.

A node receives a private snapshot of the current state plus a NodeContext and
returns a partial state. It never mutates shared state; the engine merges what
it returns.

Typical Usage:
    - Subclass Node and override ``process``
    - Or register a plain ``async def fn(state)`` with ``Graph.add_node(id, fn)``
"""

import asyncio
import inspect
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, model_validator

from leadrecon.core.logging import get_logger, LogComponent
from leadrecon.core.graph.state import NodeState, StateUpdate

logger = get_logger(LogComponent.NODES)

NodeResult = Union[StateUpdate, NodeState, Mapping[str, Any], None]


class NodeContext(BaseModel):
    """Per-invocation context handed to every node.

    Attributes:
        run_id: Identifier of the graph run
        node_id: Node being invoked
        wavefront: 1-based index of the wavefront the node runs in
        timeout: Deadline for this call in seconds, if any
        cancelled: Set by the engine when the deadline fires
        started_at: When the engine dispatched the call
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    run_id: str
    node_id: str
    wavefront: int = 1
    timeout: Optional[float] = None
    cancelled: asyncio.Event = Field(default_factory=asyncio.Event)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_cancelled(self) -> bool:
        return self.cancelled.is_set()


class Node(BaseModel):
    """
    Abstract base node for graph operations.

    Attributes:
        id: Unique node identifier
        timeout: Per-node deadline overriding GraphConfig.node_timeout
        metadata: Optional node metadata
        artifact_models: Artifact keys this node writes, mapped to the model
            each value must satisfy
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(..., description="Unique identifier for this node")
    timeout: Optional[float] = Field(default=None, gt=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {}

    @model_validator(mode='after')
    def validate_node(self) -> 'Node':
        """Validate node configuration."""
        if not self.id:
            raise ValueError("Node must have an ID")
        return self

    async def process(self, state: NodeState, context: NodeContext) -> NodeResult:
        """Process node logic. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement process()")

    async def execute(self, state: NodeState, context: NodeContext) -> StateUpdate:
        """Run ``process`` and normalise its result into a validated StateUpdate."""
        result = await self.process(state, context)
        update = coerce_update(result, state)
        self.validate_artifacts(update)
        return update

    def validate_artifacts(self, update: StateUpdate) -> None:
        """Check written artifacts against ``artifact_models``.

        Raises:
            ValueError: An artifact does not satisfy its declared model
        """
        for key, model in self.artifact_models.items():
            if key not in update.artifacts:
                continue
            try:
                model.model_validate(update.artifacts[key])
            except ValidationError as e:
                raise ValueError(f"artifact '{key}' rejected: {e}") from e


class FunctionNode(Node):
    """Node wrapping an ``async def fn(state)`` or ``async def fn(state, context)``."""

    fn: Callable[..., Any]
    _takes_context: bool = PrivateAttr(default=False)

    def model_post_init(self, __context: Any) -> None:
        params = [
            p for p in inspect.signature(self.fn).parameters.values()
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        ]
        self._takes_context = len(params) >= 2

    async def process(self, state: NodeState, context: NodeContext) -> NodeResult:
        result = self.fn(state, context) if self._takes_context else self.fn(state)
        if inspect.isawaitable(result):
            result = await result
        return result


def coerce_update(result: NodeResult, received: NodeState) -> StateUpdate:
    """Normalise whatever a node returned into a StateUpdate.

    Raises:
        TypeError: The node returned something that is not a partial state
        pydantic.ValidationError: A mapping with unknown keys or bad values
    """
    if result is None:
        return StateUpdate()
    if isinstance(result, StateUpdate):
        return result
    if isinstance(result, NodeState):
        return StateUpdate.from_node_state(result, received)
    if isinstance(result, Mapping):
        return StateUpdate.model_validate(dict(result))
    raise TypeError(
        f"node returned {type(result).__name__}; expected StateUpdate, NodeState, mapping or None"
    )
