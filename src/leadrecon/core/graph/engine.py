"""Execution engine for compiled graphs.

A run proceeds in wavefronts:
1. The first wavefront is the set of entry nodes.
2. Every node of a wavefront is invoked concurrently with its own deep copy of
   the same pre-wavefront state.
3. Once all of them have finished, their partial states are merged in
   wavefront order.
4. Only then are the outgoing edges of the finished nodes evaluated, against
   the merged state, to produce the next wavefront (duplicates removed).
5. The run ends when a wavefront comes out empty.

Because edges are evaluated per wavefront and never per node, a router that
waits for a sibling's artifact (a soft barrier) always sees every result of
the wavefront it belongs to.

Node failures go through one boundary. With the ``record`` policy an exception
(or a missed deadline) becomes an ``errors`` entry and an empty merge; with the
``raise`` policy the run is aborted after the wavefront has settled.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from leadrecon.core.config import GraphConfig
from leadrecon.core.errors import NodeExecutionError, NodeTimeoutError, RoutingError
from leadrecon.core.logging import (
    LogComponent,
    LeadReconLoggingConfig,
    get_logger,
    log_node_output,
    log_state,
    log_verbose,
)
from leadrecon.core.graph.base import END, START, ConditionalEdge, JoinEdge
from leadrecon.core.graph.nodes.base.node import Node, NodeContext
from leadrecon.core.graph.state import NodeState, NodeStatus, StateUpdate, merge_state

logger = get_logger(LogComponent.GRAPH)


class NodeOutcome(BaseModel):
    """What one node invocation produced."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    node_id: str
    status: NodeStatus
    update: StateUpdate = Field(default_factory=StateUpdate)
    error: Optional[BaseException] = None


class GraphRun(BaseModel):
    """Trace of one run.

    Attributes:
        run_id: Identifier handed to every NodeContext
        wavefronts: Node ids of each wavefront, in execution order
        status: Last status of every node that was activated
        invocations: How many times each node was invoked
        started_at: When the run began
        finished_at: When the run ended (also set on hard failure)
        state: Final merged state
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    run_id: str
    wavefronts: List[List[str]] = Field(default_factory=list)
    status: Dict[str, NodeStatus] = Field(default_factory=dict)
    invocations: Dict[str, int] = Field(default_factory=dict)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    state: Optional[NodeState] = None

    def executed(self, node_id: str) -> int:
        """Number of times ``node_id`` ran."""
        return self.invocations.get(node_id, 0)

    @property
    def failed_nodes(self) -> List[str]:
        return [
            node_id for node_id, status in self.status.items()
            if status in (NodeStatus.ERROR, NodeStatus.TIMEOUT)
        ]


class CompiledGraph:
    """An immutable, executable graph produced by ``Graph.compile()``."""

    def __init__(
        self,
        nodes: Mapping[str, Node],
        edges: Iterable[Tuple[str, str]],
        conditional_edges: Iterable[ConditionalEdge],
        join_edges: Iterable[JoinEdge],
        config: GraphConfig,
        logging_config: Optional[LeadReconLoggingConfig] = None,
    ):
        self._nodes = MappingProxyType(dict(nodes))
        self._config = config
        self._logging = logging_config or LeadReconLoggingConfig()

        entry: List[str] = []
        fixed: Dict[str, List[str]] = {}
        for source, target in edges:
            if source == START:
                _append_unique(entry, target)
            else:
                _append_unique(fixed.setdefault(source, []), target)

        routers: Dict[str, List[ConditionalEdge]] = {}
        for edge in conditional_edges:
            routers.setdefault(edge.source, []).append(edge)

        self._entry = tuple(entry)
        self._edges = MappingProxyType({k: tuple(v) for k, v in fixed.items()})
        self._routers = MappingProxyType({k: tuple(v) for k, v in routers.items()})
        self._joins = tuple(join_edges)

    @property
    def nodes(self) -> Mapping[str, Node]:
        return self._nodes

    @property
    def entry_nodes(self) -> Tuple[str, ...]:
        return self._entry

    @property
    def edges(self) -> Mapping[str, Tuple[str, ...]]:
        return self._edges

    @property
    def conditional_edges(self) -> Mapping[str, Tuple[ConditionalEdge, ...]]:
        return self._routers

    @property
    def join_edges(self) -> Tuple[JoinEdge, ...]:
        return self._joins

    @property
    def config(self) -> GraphConfig:
        return self._config

    async def invoke(self, state: Any, run_id: Optional[str] = None) -> NodeState:
        """Run the graph and return the final merged state.

        Args:
            state: Initial NodeState, or a bare packet to wrap in one
            run_id: Optional identifier for logs and NodeContext

        Raises:
            NodeExecutionError: A node failed under the ``raise`` policy
            RoutingError: A router returned an unknown node id
        """
        run = await self.run(state, run_id=run_id)
        return run.state

    async def run(self, state: Any, run_id: Optional[str] = None) -> GraphRun:
        """Run the graph and return the full trace (see ``invoke``)."""
        if not isinstance(state, NodeState):
            state = NodeState.initial(state)

        run = GraphRun(run_id=run_id or uuid.uuid4().hex[:12])
        logger.info(f"[{run.run_id}] Starting run at {list(self._entry)}")

        wavefront = list(self._entry)
        index = 0
        try:
            while wavefront:
                index += 1
                if index > self._config.max_wavefronts:
                    message = f"graph: wavefront limit ({self._config.max_wavefronts}) exceeded"
                    logger.error(f"[{run.run_id}] {message}, aborting execution.")
                    state = merge_state(state, StateUpdate(errors=[message]))
                    break

                run.wavefronts.append(list(wavefront))
                log_verbose(logger, f"[{run.run_id}] Wavefront {index}: {wavefront}")

                outcomes = await asyncio.gather(
                    *(self._invoke(node_id, state, run, index) for node_id in wavefront)
                )

                hard_failure: Optional[NodeOutcome] = None
                for outcome in outcomes:
                    run.status[outcome.node_id] = outcome.status
                    if outcome.error is not None and self._config.failure_policy == "raise":
                        hard_failure = hard_failure or outcome
                        continue
                    state = merge_state(state, outcome.update)

                if hard_failure is not None:
                    run.state = state
                    error = _as_execution_error(hard_failure, run)
                    if error is hard_failure.error:
                        raise error
                    raise error from hard_failure.error

                wavefront = self._next_wavefront(wavefront, state, run)
        finally:
            run.finished_at = datetime.now(timezone.utc)

        run.state = state
        logger.info(
            f"[{run.run_id}] Run finished after {len(run.wavefronts)} wavefront(s), "
            f"{len(state.errors)} error(s)"
        )
        if self._logging.dump_final_state:
            log_state(logger, state.model_dump())
        return run

    async def _invoke(self, node_id: str, state: NodeState, run: GraphRun, index: int) -> NodeOutcome:
        """Invoke one node inside the failure boundary."""
        node = self._nodes[node_id]
        timeout = node.timeout or self._config.node_timeout
        context = NodeContext(run_id=run.run_id, node_id=node_id, wavefront=index, timeout=timeout)

        run.status[node_id] = NodeStatus.RUNNING
        run.invocations[node_id] = run.invocations.get(node_id, 0) + 1

        task = asyncio.ensure_future(node.execute(state.snapshot(), context))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if not done:
            context.cancelled.set()
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            error = NodeTimeoutError(node_id, timeout)
            return self._failed(node_id, NodeStatus.TIMEOUT, error)

        try:
            update = task.result()
        except asyncio.CancelledError as e:
            # The engine only cancels on timeout, handled above
            return self._failed(node_id, NodeStatus.ERROR, e)
        except Exception as e:
            return self._failed(node_id, NodeStatus.ERROR, e)

        if update.packet is not None and update.packet != state.packet:
            logger.warning(f"Node {node_id} returned a different packet; discarded")

        if self._logging.show_node_outputs:
            log_node_output(logger, node_id, update.artifacts)
        return NodeOutcome(node_id=node_id, status=NodeStatus.COMPLETED, update=update)

    def _failed(self, node_id: str, status: NodeStatus, error: BaseException) -> NodeOutcome:
        message = _describe_failure(node_id, error)
        logger.error(f"Error in node {message}")
        return NodeOutcome(
            node_id=node_id,
            status=status,
            update=StateUpdate(errors=[message]),
            error=error,
        )

    def _next_wavefront(self, finished: Sequence[str], state: NodeState, run: GraphRun) -> List[str]:
        """Evaluate the outgoing edges of every finished node against merged state."""
        upcoming: List[str] = []

        for node_id in finished:
            targets: List[str] = list(self._edges.get(node_id, ()))
            for edge in self._routers.get(node_id, ()):
                targets.extend(self._route(edge, state))
            for target in targets:
                if target != END:
                    _append_unique(upcoming, target)
            if self._logging.show_node_transitions and targets:
                logger.info(f"[{run.run_id}] Transitioning {node_id} --> {targets}")
            elif self._logging.show_node_transitions:
                log_verbose(logger, f"[{run.run_id}] {node_id} activated nothing")

        finished_set = set(finished)
        for join in self._joins:
            if finished_set.isdisjoint(join.sources):
                continue
            # A source still queued means the barrier is not satisfied yet
            if any(source in upcoming for source in join.sources):
                continue
            if self._logging.show_node_transitions:
                logger.info(f"[{run.run_id}] Joining {list(join.sources)} ==> {join.target}")
            _append_unique(upcoming, join.target)

        return upcoming

    def _route(self, edge: ConditionalEdge, state: NodeState) -> List[str]:
        chosen = edge.router(state)
        if chosen is None:
            return []
        if isinstance(chosen, str):
            chosen = [chosen]

        targets = list(chosen)
        for target in targets:
            if not isinstance(target, str):
                raise RoutingError(f"router on {edge.source} returned non-string {target!r}")
            if target != END and target not in self._nodes:
                raise RoutingError(f"router on {edge.source} returned unknown node '{target}'")
            if edge.destinations is not None and target not in edge.destinations:
                raise RoutingError(
                    f"router on {edge.source} returned '{target}' outside its declared destinations"
                )
        return targets


def _append_unique(items: List[str], item: str) -> None:
    if item not in items:
        items.append(item)


def _describe_failure(node_id: str, error: BaseException) -> str:
    if isinstance(error, NodeExecutionError):
        return f"{node_id}: {type(error).__name__}: {error.detail}"
    return f"{node_id}: {_failure_detail(error)}"


def _failure_detail(error: BaseException) -> str:
    if isinstance(error, asyncio.CancelledError):
        return f"{type(error).__name__}: {str(error) or 'cancelled inside the node'}"
    return f"{type(error).__name__}: {error}"


def _as_execution_error(outcome: NodeOutcome, run: GraphRun) -> NodeExecutionError:
    if isinstance(outcome.error, NodeExecutionError):
        outcome.error.run = run
        return outcome.error
    return NodeExecutionError(
        outcome.node_id,
        _failure_detail(outcome.error),
        run=run,
    )
