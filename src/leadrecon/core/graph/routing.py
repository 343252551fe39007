"""Router helpers for conditional edges.

Routers are pure functions of state. Anything they depend on besides state
(feature flags, provider tables) is bound when the router is built, at graph
compile time, never read from the environment while a run is in flight.
"""

from typing import Callable, Mapping, Sequence

from leadrecon.core.graph.state import NodeState
from leadrecon.core.graph.base import Router


def wait_for_siblings(
    target: str,
    sibling_artifacts: Sequence[str],
    fan_out: Callable[[NodeState], bool],
) -> Router:
    """Soft barrier: go to ``target`` once every sibling has written its artifact.

    Args:
        target: Node to activate when the barrier opens
        sibling_artifacts: Dotted artifact paths the siblings write
        fan_out: Tells whether this run scheduled the siblings at all; when it
            returns False the branch proceeds straight to ``target``

    The engine merges a whole wavefront before evaluating any of its edges, so
    when siblings share a wavefront the first router evaluated already sees
    them all and the second activation is removed by wavefront deduplication.
    """
    paths = tuple(sibling_artifacts)

    def router(state: NodeState) -> Sequence[str]:
        if fan_out(state) and not all(state.has_artifact(path) for path in paths):
            return []
        return [target]

    router.__name__ = f"wait_for_{'_'.join(p.replace('.', '_') for p in paths) or 'nothing'}"
    return router


def route_by(selector: Callable[[NodeState], str], table: Mapping[str, Sequence[str]]) -> Router:
    """Route on a key computed from state; unknown keys activate nothing."""
    frozen = {key: tuple(targets) for key, targets in table.items()}

    def router(state: NodeState) -> Sequence[str]:
        return list(frozen.get(selector(state), ()))

    return router
