"""
Core data types for integration records.

This module defines the structures persisted in the integrations file:
- AuthPluginSpec: One authentication mechanism attached to a direction
- IntegrationRecord: One named integration with destination, limits and auth

Both types convert to and from the snake_case wire form used in the YAML
document (`to_dict` / `from_dict`).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from .errors import ValidationError

# Keys written for every record, in wire order.
RECORD_KEYS = (
    "name",
    "destination",
    "in_rate_limit",
    "out_rate_limit",
    "incoming_auth",
    "outgoing_auth",
)
ALLOWLIST_KEY = "allowlist"


@dataclass
class AuthPluginSpec:
    """A tagged, parameterized authentication mechanism.

    Attributes:
        kind: Mechanism tag understood by the gateway (e.g. "token", "basic")
        params: Mechanism-specific parameters; opaque to this tool
    """

    kind: str
    params: dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        if not isinstance(self.kind, str) or not self.kind.strip():
            raise ValidationError("auth plugin type must be a non-empty string")
        if not isinstance(self.params, dict):
            raise ValidationError(f"auth plugin {self.kind}: params must be a mapping")

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "params": copy.deepcopy(self.params)}

    @classmethod
    def from_dict(cls, raw: Any) -> AuthPluginSpec:
        if not isinstance(raw, dict):
            raise ValidationError(f"auth plugin entry must be a mapping, got {type(raw).__name__}")
        params = raw.get("params")
        spec = cls(kind=raw.get("type") or "", params={} if params is None else params)
        spec.validate()
        return spec


@dataclass
class IntegrationRecord:
    """One named integration configuration entry.

    Attributes:
        name: Unique identifier, compared case-insensitively
        destination: Base URL the gateway proxies outbound traffic to
        in_rate_limit: Request budget for inbound traffic
        out_rate_limit: Request budget for outbound traffic
        incoming_auth: Auth plugins applied to inbound requests
        outgoing_auth: Auth plugins applied to outbound requests
        allowed_callers: Allow-list entries, passed through untouched
        extras: Other stored keys, preserved verbatim on rewrite
    """

    name: str
    destination: str = ""
    in_rate_limit: int = 0
    out_rate_limit: int = 0
    incoming_auth: list[AuthPluginSpec] = field(default_factory=list)
    outgoing_auth: list[AuthPluginSpec] = field(default_factory=list)
    allowed_callers: list[Any] = field(default_factory=list)
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """Case-insensitive identity used for uniqueness checks."""
        return self.name.lower()

    def validate(self) -> None:
        """Raise ValidationError if the record violates a structural invariant."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("integration name must be a non-empty string")
        if not isinstance(self.destination, str):
            raise ValidationError(f"integration {self.name}: destination must be a string")
        for label, value in (
            ("in_rate_limit", self.in_rate_limit),
            ("out_rate_limit", self.out_rate_limit),
        ):
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(
                    f"integration {self.name}: {label} must be a non-negative integer"
                )
        for spec in [*self.incoming_auth, *self.outgoing_auth]:
            spec.validate()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "destination": self.destination,
            "in_rate_limit": self.in_rate_limit,
            "out_rate_limit": self.out_rate_limit,
            "incoming_auth": [spec.to_dict() for spec in self.incoming_auth],
            "outgoing_auth": [spec.to_dict() for spec in self.outgoing_auth],
        }
        if self.allowed_callers:
            data[ALLOWLIST_KEY] = copy.deepcopy(self.allowed_callers)
        for key, value in self.extras.items():
            data.setdefault(key, copy.deepcopy(value))
        return data

    @classmethod
    def from_dict(cls, raw: Any) -> IntegrationRecord:
        """Parse and validate one record from its wire form."""
        if not isinstance(raw, dict):
            raise ValidationError(f"integration entry must be a mapping, got {type(raw).__name__}")
        name = raw.get("name")
        if not isinstance(name, str):
            raise ValidationError("integration name must be a non-empty string")
        record = cls(
            name=name,
            destination=raw.get("destination") or "",
            in_rate_limit=_int_or_zero(raw.get("in_rate_limit")),
            out_rate_limit=_int_or_zero(raw.get("out_rate_limit")),
            incoming_auth=_parse_specs(name, "incoming_auth", raw.get("incoming_auth")),
            outgoing_auth=_parse_specs(name, "outgoing_auth", raw.get("outgoing_auth")),
            allowed_callers=_parse_allowlist(name, raw.get(ALLOWLIST_KEY)),
            extras={
                key: value
                for key, value in raw.items()
                if key not in RECORD_KEYS and key != ALLOWLIST_KEY
            },
        )
        record.validate()
        return record


def _int_or_zero(value: Any) -> Any:
    return 0 if value is None else value


def _parse_specs(name: str, label: str, raw: Any) -> list[AuthPluginSpec]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError(f"integration {name}: {label} must be a list")
    return [AuthPluginSpec.from_dict(item) for item in raw]


def _parse_allowlist(name: str, raw: Any) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError(f"integration {name}: {ALLOWLIST_KEY} must be a list")
    return list(raw)
