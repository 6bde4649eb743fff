"""
Gateway Integrations - authoring tool for auth gateway integration records.

This package builds integration records from a catalog of provider
templates and maintains them in a YAML file consumed by the gateway.

Main entry point is the CLI via the `integrations` command.

Example:
    $ integrations slack -token env:SLACK_TOKEN -signing-secret env:SLACK_SIGNING
    $ integrations list
"""

__all__ = [
    "__version__",
    "AuthPluginSpec",
    "BuilderRegistry",
    "ConfigStore",
    "CrudEngine",
    "IntegrationRecord",
    "default_registry",
]
__version__ = "0.1.0"

from .engine import CrudEngine
from .providers import BuilderRegistry, default_registry
from .store import ConfigStore
from .types import AuthPluginSpec, IntegrationRecord
