"""Shared base for the event pipeline's nodes."""

from pydantic import BaseModel, Field

from leadrecon.contracts import EventPacket, as_packet
from leadrecon.core.graph.nodes.base.node import Node
from leadrecon.core.graph.state import NodeState, StateUpdate
from leadrecon.integrations import Collaborators


class EventNode(Node):
    """Node that reads an EventPacket and talks to external collaborators.

    Attributes:
        collaborators: Storage, LLM and API clients available to the node
    """

    collaborators: Collaborators = Field(default_factory=Collaborators)

    @staticmethod
    def packet(state: NodeState) -> EventPacket:
        return as_packet(state.packet)

    @staticmethod
    def emit(key: str, artifact: BaseModel) -> StateUpdate:
        """Partial state writing one artifact, unset optional fields left out."""
        return StateUpdate(artifacts={key: artifact.model_dump(mode="json", exclude_none=True)})
