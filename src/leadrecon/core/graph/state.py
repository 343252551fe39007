"""State management for the graph system.

This module provides:
1. NodeStatus: An enumeration of node execution statuses
2. NodeState: The value threaded through a run (packet, artifacts, approvals, errors)
3. StateUpdate: The partial state a node hands back to the engine
4. merge_state: The pure function folding a StateUpdate into a NodeState

Merge rules:
    - ``artifacts`` is unioned by key. Where the prior and the incoming value
      of a key are both mappings they are unioned recursively; any other
      incoming value replaces the prior one. Keys are never removed.
    - ``approvals`` and ``errors`` are appended.
    - ``packet`` is never taken from an update.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

_MISSING = object()


class NodeStatus(str, Enum):
    """Node execution status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"
    TIMEOUT = "timeout"


class NodeState(BaseModel):
    """
    State threaded through one run of a compiled graph.

    Attributes:
        packet: Read-only input describing the unit of work
        artifacts: Node outputs, namespaced by top-level key
        approvals: Sign-off gates passed so far (append-only)
        errors: One human-readable entry per failure (append-only)
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    packet: Any = None
    artifacts: Dict[str, Any] = Field(default_factory=dict)
    approvals: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def initial(cls, packet: Any) -> "NodeState":
        """Fresh state for a packet: empty artifacts, approvals and errors."""
        return cls(packet=packet)

    def get_artifact(self, path: str, default: Any = None) -> Any:
        """Look up an artifact by dotted path, e.g. ``deck.providers.google``."""
        value = _lookup(self.artifacts, path)
        return default if value is _MISSING else value

    def has_artifact(self, path: str) -> bool:
        """True when the dotted path exists under ``artifacts``."""
        return _lookup(self.artifacts, path) is not _MISSING

    def snapshot(self) -> "NodeState":
        """Deep copy handed to a node so it cannot alias shared state."""
        return self.model_copy(deep=True)


class StateUpdate(BaseModel):
    """Partial state returned by a node."""
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    artifacts: Dict[str, Any] = Field(default_factory=dict)
    approvals: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    packet: Any = None

    @classmethod
    def from_node_state(cls, returned: NodeState, received: NodeState) -> "StateUpdate":
        """Turn a full state returned by a node into the update it implies.

        Log entries already present in the state the node received are not
        appended a second time, and only artifact leaves the node added or
        changed are carried, so an untouched copy of upstream output cannot
        overwrite a sibling's write during the merge.
        """
        return cls(
            artifacts=_changed_artifacts(received.artifacts, returned.artifacts),
            approvals=_appended(received.approvals, returned.approvals),
            errors=_appended(received.errors, returned.errors),
            packet=None if returned.packet == received.packet else returned.packet,
        )

    def is_empty(self) -> bool:
        return not (self.artifacts or self.approvals or self.errors)


def merge_artifacts(current: Mapping[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    """Union two artifact mappings without ever dropping a key."""
    merged = dict(current)
    for key, value in incoming.items():
        previous = merged.get(key, _MISSING)
        if isinstance(previous, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_artifacts(previous, value)
        else:
            merged[key] = value
    return merged


def merge_state(state: NodeState, update: Optional[StateUpdate]) -> NodeState:
    """Fold a node's partial state into the shared state.

    Pure: ``state`` is left untouched and a new NodeState is returned.
    """
    if update is None or update.is_empty():
        return state
    return state.model_copy(update={
        "artifacts": merge_artifacts(state.artifacts, update.artifacts),
        "approvals": [*state.approvals, *update.approvals],
        "errors": [*state.errors, *update.errors],
    })


def _lookup(data: Mapping[str, Any], path: str) -> Any:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _appended(before: Sequence[str], after: Sequence[str]) -> List[str]:
    before, after = list(before), list(after)
    if after[:len(before)] == before:
        return after[len(before):]
    return [entry for entry in after if entry not in before]


def _changed_artifacts(before: Mapping[str, Any], after: Mapping[str, Any]) -> Dict[str, Any]:
    changed: Dict[str, Any] = {}
    for key, value in after.items():
        previous = before.get(key, _MISSING)
        if isinstance(previous, Mapping) and isinstance(value, Mapping):
            nested = _changed_artifacts(previous, value)
            if nested:
                changed[key] = nested
        elif previous is _MISSING or previous != value:
            changed[key] = value
    return changed
