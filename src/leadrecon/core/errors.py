"""Exception hierarchy for leadrecon."""

from typing import Any, Optional


class LeadReconError(Exception):
    """Base class for every error raised by leadrecon."""


class GraphCompileError(LeadReconError, ValueError):
    """Raised when a graph definition cannot be compiled.

    Attributes:
        problems: Every validation message collected for the graph
    """

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class RoutingError(LeadReconError):
    """A conditional edge produced something that is not a node id."""


class NodeExecutionError(LeadReconError):
    """A node failed and the graph runs with the ``raise`` failure policy.

    Attributes:
        node_id: Node that failed
        run: Partial ``GraphRun`` at the moment the run was aborted
    """

    def __init__(self, node_id: str, message: str, run: Optional[Any] = None):
        self.node_id = node_id
        self.detail = message
        self.run = run
        super().__init__(f"{node_id}: {message}")


class NodeTimeoutError(NodeExecutionError):
    """A node call exceeded its deadline."""

    def __init__(self, node_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(node_id, f"timed out after {timeout:g}s")


class CollaboratorUnavailable(LeadReconError):
    """An external collaborator is not configured (missing credential, URL...)."""


class IntegrationError(LeadReconError):
    """An external collaborator call failed."""
