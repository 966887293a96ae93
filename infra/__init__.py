"""
Infrastructure module exports.

Configuration and bootstrap for the event log backends.
"""

from .config import InfraConfig, MirrorBackendType, get_config
from .bootstrap import bootstrap_event_log

__all__ = [
    "InfraConfig",
    "MirrorBackendType",
    "get_config",
    "bootstrap_event_log",
]
