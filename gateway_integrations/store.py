"""
YAML-backed persistence for the integration collection.

The whole collection is read by `load()` and rewritten by `save()`; there
is no per-record update of the file. Writes go to a temporary file in the
same directory and are renamed over the target, so a failed save leaves
the previous file intact.
"""

from __future__ import annotations

import hashlib
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Iterable

import yaml

from .errors import PersistenceError, StaleWriteError, ValidationError
from .types import IntegrationRecord

ROOT_KEY = "integrations"
ABSENT = "absent"

logger = logging.getLogger("gateway_integrations.store")


def fingerprint_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class ConfigStore:
    """Loads and saves the integration collection from one YAML file.

    Top-level keys other than `root_key` are kept from the last load and
    written back unchanged. When `check_fingerprint` is enabled, `save()`
    refuses to overwrite a file that changed since the last `load()`.

    Attributes:
        path: Backing YAML file
        root_key: Top-level key holding the record list
        check_fingerprint: Whether to reject saves over a modified file
    """

    def __init__(
        self,
        path: str | Path,
        root_key: str = ROOT_KEY,
        check_fingerprint: bool = True,
    ):
        self.path = Path(path)
        self.root_key = root_key
        self.check_fingerprint = check_fingerprint
        self._fingerprint: str | None = None
        self._document: dict[str, Any] = {}

    @property
    def fingerprint(self) -> str | None:
        """SHA-256 of the bytes last loaded, ABSENT for a missing file, None before load."""
        return self._fingerprint

    def load(self) -> list[IntegrationRecord]:
        """Read the collection; a missing file is an empty collection."""
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug("integrations file %s not found; starting empty", self.path)
            self._fingerprint = ABSENT
            self._document = {}
            return []
        except OSError as exc:
            raise PersistenceError(f"cannot read {self.path}: {exc}") from exc

        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as exc:
            raise PersistenceError(f"{self.path} is not valid YAML: {exc}") from exc
        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise PersistenceError(f"{self.path}: top level must be a mapping")

        raw = document.get(self.root_key)
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise PersistenceError(f"{self.path}: '{self.root_key}' must be a list")

        records = []
        for index, item in enumerate(raw):
            try:
                records.append(IntegrationRecord.from_dict(item))
            except ValidationError as exc:
                raise PersistenceError(f"{self.path}: entry {index}: {exc}") from exc

        seen: set[str] = set()
        for record in records:
            if record.key in seen:
                logger.warning("duplicate integration name %r in %s", record.key, self.path)
            seen.add(record.key)

        self._fingerprint = fingerprint_bytes(data)
        self._document = document
        logger.debug("loaded %d integrations from %s", len(records), self.path)
        return records

    def save(self, records: Iterable[IntegrationRecord]) -> None:
        """Rewrite the whole collection atomically."""
        payload = [record.to_dict() for record in records]
        document = {
            key: (payload if key == self.root_key else value)
            for key, value in self._document.items()
        }
        document.setdefault(self.root_key, payload)
        try:
            text = yaml.safe_dump(
                document,
                sort_keys=False,
                default_flow_style=False,
                allow_unicode=True,
            )
        except yaml.YAMLError as exc:
            raise PersistenceError(f"cannot serialize integrations: {exc}") from exc

        self._check_unchanged()
        self._write(text)
        self._fingerprint = fingerprint_bytes(text.encode("utf-8"))
        self._document = document
        logger.debug("saved %d integrations to %s", len(payload), self.path)

    def _check_unchanged(self) -> None:
        if not self.check_fingerprint or self._fingerprint is None:
            return
        try:
            current = fingerprint_bytes(self.path.read_bytes())
        except FileNotFoundError:
            current = ABSENT
        except OSError as exc:
            raise PersistenceError(f"cannot read {self.path}: {exc}") from exc
        if current != self._fingerprint:
            raise StaleWriteError(
                f"{self.path} was modified by another process since it was loaded; "
                "re-run the command"
            )

    def _write(self, text: str) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
        except OSError as exc:
            raise PersistenceError(f"cannot write {self.path}: {exc}") from exc

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            if self.path.exists():
                os.chmod(tmp_path, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceError(f"cannot write {self.path}: {exc}") from exc
        finally:
            tmp_path.unlink(missing_ok=True)
