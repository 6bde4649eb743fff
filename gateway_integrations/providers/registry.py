"""Builder registry mapping provider names to builders."""

from __future__ import annotations

from .base import Builder, ProviderBuilder
from .catalog import PROVIDERS


class BuilderRegistry:
    """Case-insensitive mapping from provider name to builder.

    Re-registering a name replaces the previous builder.
    """

    def __init__(self) -> None:
        self._builders: dict[str, Builder] = {}

    def register(self, name: str, builder: Builder) -> None:
        self._builders[name.lower()] = builder

    def get(self, name: str) -> Builder | None:
        """Return the builder for `name`, or None if it is not registered."""
        return self._builders.get(name.lower())

    def list_names(self) -> list[str]:
        """Return the registered provider names, sorted."""
        return sorted(self._builders)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._builders

    def __len__(self) -> int:
        return len(self._builders)


def default_registry() -> BuilderRegistry:
    """Build a registry holding one builder per catalog provider."""
    registry = BuilderRegistry()
    for descriptor in PROVIDERS:
        registry.register(descriptor.name, ProviderBuilder(descriptor))
    return registry
