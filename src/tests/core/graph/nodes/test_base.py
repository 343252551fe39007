"""Tests for base Node functionality.

This module tests the core Node class functionality including:
- Node initialization and validation
- Result normalisation into StateUpdate
- Artifact model checks
- Function nodes with and without a context parameter
"""

from typing import Optional

import pytest
from pydantic import BaseModel, ValidationError

from leadrecon.core.graph.nodes.base import FunctionNode, Node, NodeContext, coerce_update
from leadrecon.core.graph.state import NodeState, StateUpdate


class Greeting(BaseModel):
    text: str


class GreeterNode(Node):
    """Writes a greeting artifact checked against ``Greeting``."""

    artifact_models = {"greeting": Greeting}
    text: Optional[str] = "hello"

    async def process(self, state: NodeState, context: NodeContext):
        return {"artifacts": {"greeting": {"text": self.text} if self.text else {"wrong": 1}}}


@pytest.fixture
def context() -> NodeContext:
    """Fixture providing a node context."""
    return NodeContext(run_id="t", node_id="greeter")


class TestNodeInitialization:
    """Test suite for node initialization."""

    def test_requires_id(self):
        with pytest.raises(ValueError):
            GreeterNode(id="")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            GreeterNode(id="greeter", timeout=0)

    @pytest.mark.asyncio
    async def test_base_process_not_implemented(self, context: NodeContext):
        with pytest.raises(NotImplementedError):
            await Node(id="bare").process(NodeState(), context)


class TestExecute:
    """Test result normalisation and artifact checks."""

    @pytest.mark.asyncio
    async def test_valid_artifact(self, context: NodeContext):
        update = await GreeterNode(id="greeter").execute(NodeState(), context)
        assert update.artifacts == {"greeting": {"text": "hello"}}

    @pytest.mark.asyncio
    async def test_rejected_artifact(self, context: NodeContext):
        with pytest.raises(ValueError, match="artifact 'greeting' rejected"):
            await GreeterNode(id="greeter", text=None).execute(NodeState(), context)


class TestCoerceUpdate:
    """Test every accepted return shape."""

    def test_none(self):
        assert coerce_update(None, NodeState()).is_empty()

    def test_state_update_passthrough(self):
        update = StateUpdate(errors=["x"])
        assert coerce_update(update, NodeState()) is update

    def test_mapping(self):
        update = coerce_update({"approvals": ["ok"]}, NodeState())
        assert update.approvals == ["ok"]

    def test_mapping_with_unknown_key(self):
        with pytest.raises(ValidationError):
            coerce_update({"results": {}}, NodeState())

    def test_full_state_only_new_log_entries(self):
        received = NodeState(errors=["old"], approvals=["a1"])
        returned = received.model_copy(update={
            "errors": ["old", "new"],
            "approvals": ["a1", "a2"],
            "artifacts": {"k": 1},
        })
        update = coerce_update(returned, received)
        assert update.errors == ["new"]
        assert update.approvals == ["a2"]
        assert update.artifacts == {"k": 1}

    def test_full_state_omits_untouched_artifacts(self):
        received = NodeState(artifacts={"seed": {"status": "draft"}})
        returned = received.model_copy(update={
            "artifacts": {"seed": {"status": "draft"}, "audit": "ok"},
        })
        update = coerce_update(returned, received)
        assert update.artifacts == {"audit": "ok"}

    def test_other_types_rejected(self):
        with pytest.raises(TypeError):
            coerce_update(42, NodeState())


class TestFunctionNode:
    """Test function wrapping."""

    @pytest.mark.asyncio
    async def test_state_only(self, context: NodeContext):
        node = FunctionNode(id="f", fn=lambda state: {"artifacts": {"seen": state.packet}})
        update = await node.execute(NodeState(packet="p"), context)
        assert update.artifacts == {"seen": "p"}

    @pytest.mark.asyncio
    async def test_with_context(self, context: NodeContext):
        async def fn(state, ctx):
            return {"artifacts": {"who": ctx.node_id, "cancelled": ctx.is_cancelled()}}

        update = await FunctionNode(id="f", fn=fn).execute(NodeState(), context)
        assert update.artifacts == {"who": "greeter", "cancelled": False}
