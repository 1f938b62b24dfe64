"""
Infrastructure module exports.

Configuration and bootstrap for the session backend and relay components.
"""

from .config import InfraConfig, get_config, SessionBackendType
from .bootstrap import InfraBootstrap, bootstrap_infrastructure, get_bootstrap

__all__ = [
    "InfraConfig",
    "get_config",
    "SessionBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
    "get_bootstrap",
]
