"""
Provider catalog and builder registry.

To add a provider:
1. Append a ProviderDescriptor to PROVIDERS in catalog.py
2. Add a golden-value test in tests/test_provider_catalog.py

No CLI or engine change is needed; default_registry() picks it up.
"""

from .base import Builder, FlagSpec, ProviderBuilder, ProviderDescriptor, normalize_domain
from .catalog import PROVIDERS
from .registry import BuilderRegistry, default_registry

__all__ = [
    "Builder",
    "BuilderRegistry",
    "FlagSpec",
    "PROVIDERS",
    "ProviderBuilder",
    "ProviderDescriptor",
    "default_registry",
    "normalize_domain",
]
