"""
CRUD operations over the integration collection.

Every mutating operation is a full load -> mutate -> save round trip
against the ConfigStore. Names are lowercased before they are stored and
compared case-insensitively, so the collection never holds two records
whose names differ only in case.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from .errors import ConflictError, UsageError
from .logging_utils import log_event
from .providers.registry import BuilderRegistry
from .store import ConfigStore
from .types import IntegrationRecord

logger = logging.getLogger("gateway_integrations.engine")


def _normalized(record: IntegrationRecord) -> IntegrationRecord:
    record.validate()
    return replace(record, name=record.name.lower())


def _find(records: list[IntegrationRecord], name: str) -> int | None:
    key = name.lower()
    for index, record in enumerate(records):
        if record.key == key:
            return index
    return None


class CrudEngine:
    """Dispatches add/update/delete/list against a store.

    The registry is only consulted by the *_from_args paths; delete and
    list work without one.
    """

    def __init__(self, store: ConfigStore, registry: BuilderRegistry | None = None):
        self.store = store
        self.registry = registry

    def build(self, provider: str, args: Sequence[str]) -> IntegrationRecord:
        """Build a record with the named provider's builder."""
        if self.registry is None:
            raise UsageError("no provider registry configured")
        builder = self.registry.get(provider)
        if builder is None:
            known = ", ".join(self.registry.list_names())
            raise UsageError(f"unknown provider: {provider}. Known providers: {known}")
        return builder(args)

    def add(self, record: IntegrationRecord) -> IntegrationRecord:
        """Append `record` under its lowercased name and return the stored copy."""
        record = _normalized(record)
        records = self.store.load()
        if _find(records, record.name) is not None:
            raise ConflictError(f"integration {record.name} already exists")
        records.append(record)
        self.store.save(records)
        log_event(logger, "integration added", integration=record.name, total=len(records))
        return record

    def update(self, record: IntegrationRecord) -> bool:
        """Replace the record with the same name, or append it.

        Returns True when an existing record was replaced. The caller's
        record is left untouched; a lowercased copy is stored.
        """
        record = _normalized(record)
        records = self.store.load()
        index = _find(records, record.name)
        if index is None:
            records.append(record)
        else:
            records[index] = record
        self.store.save(records)
        log_event(
            logger,
            "integration updated" if index is not None else "integration upserted",
            integration=record.name,
            total=len(records),
        )
        return index is not None

    def delete(self, name: str) -> bool:
        """Remove the record named `name`; a missing name is a no-op.

        The collection is saved either way. Returns True if a record was removed.
        """
        name = name.lower()
        records = self.store.load()
        index = _find(records, name)
        if index is not None:
            del records[index]
        self.store.save(records)
        log_event(
            logger,
            "integration deleted" if index is not None else "integration not found",
            integration=name,
            total=len(records),
        )
        return index is not None

    def list_names(self) -> list[str]:
        """Names of all records in stored order."""
        return [record.name for record in self.store.load()]

    def get(self, name: str) -> IntegrationRecord | None:
        records = self.store.load()
        index = _find(records, name)
        return None if index is None else records[index]

    def add_from_args(self, provider: str, args: Sequence[str]) -> IntegrationRecord:
        return self.add(self.build(provider, args))

    def update_from_args(
        self, provider: str, args: Sequence[str]
    ) -> tuple[IntegrationRecord, bool]:
        record = _normalized(self.build(provider, args))
        replaced = self.update(record)
        return record, replaced
