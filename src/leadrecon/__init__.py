"""leadrecon - wavefront graph orchestration for event content pipelines."""

from leadrecon.conductor import build_graph, initial_state, run_event
from leadrecon.core import configure_logging, FeatureFlags, GraphConfig, LogComponent, LogLevel
from leadrecon.core.graph import Graph, NodeState, run_batch

__all__ = [
    'build_graph',
    'initial_state',
    'run_event',
    'run_batch',
    'Graph',
    'NodeState',
    'GraphConfig',
    'FeatureFlags',
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
