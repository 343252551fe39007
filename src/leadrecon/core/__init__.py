"""Core modules for leadrecon."""

from leadrecon.core.config import FeatureFlags, GraphConfig, IntegrationSettings
from leadrecon.core.logging import configure_logging, LogLevel, LogComponent

__all__ = [
    'GraphConfig',
    'FeatureFlags',
    'IntegrationSettings',
    'configure_logging',
    'LogLevel',
    'LogComponent',
]
