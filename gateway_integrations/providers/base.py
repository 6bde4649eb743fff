"""Provider descriptors and the generic builder that materializes them."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from ..errors import ValidationError
from ..types import AuthPluginSpec, IntegrationRecord

Builder = Callable[[Sequence[str]], IntegrationRecord]

DEFAULT_RATE_LIMIT = 100

_SCHEMES = ("https://", "http://")


def normalize_domain(domain: str) -> str:
    """Return `domain` as a base URL: https:// scheme, no trailing slash.

    Idempotent; a blank domain (or a bare scheme) normalizes to "".
    """
    value = domain.strip()
    scheme = ""
    for prefix in _SCHEMES:
        if value.lower().startswith(prefix):
            scheme, value = value[: len(prefix)], value[len(prefix) :]
            break
    host = value.strip().rstrip("/")
    if not host:
        return ""
    return f"{scheme or 'https://'}{host}"


@dataclass(frozen=True)
class FlagSpec:
    """One provider flag.

    Attributes:
        name: Flag name without dashes, e.g. "signing-secret"
        help: Short description shown by `integrations providers`
        default: Value used when the flag is not supplied
        required: Whether a blank value is rejected
    """

    name: str
    help: str = ""
    default: str = ""
    required: bool = True

    @property
    def dest(self) -> str:
        return self.name.replace("-", "_")


@dataclass(frozen=True)
class ProviderDescriptor:
    """Declarative template for one provider.

    String values in `destination` and in the auth templates may contain
    `{flag}` placeholders (hyphens replaced by underscores).
    """

    name: str
    destination: str
    flags: tuple[FlagSpec, ...] = ()
    in_rate_limit: int = DEFAULT_RATE_LIMIT
    out_rate_limit: int = DEFAULT_RATE_LIMIT
    incoming_auth: tuple[dict[str, Any], ...] = ()
    outgoing_auth: tuple[dict[str, Any], ...] = ()

    @property
    def all_flags(self) -> tuple[FlagSpec, ...]:
        name = FlagSpec("name", "integration name", default=self.name, required=False)
        return (name, *self.flags)

    @property
    def required_flags(self) -> list[str]:
        return [flag.name for flag in self.flags if flag.required]

    @property
    def optional_flags(self) -> list[str]:
        return ["name", *(flag.name for flag in self.flags if not flag.required)]


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that raises ValidationError instead of exiting."""

    def error(self, message: str):  # type: ignore[override]
        raise ValidationError(f"{self.prog}: {message}")


class ProviderBuilder:
    """Builder for any catalog provider.

    Calling the builder parses `-flag value` arguments against the
    descriptor's flags and returns a fresh IntegrationRecord. It performs
    no I/O and keeps no state between calls.
    """

    def __init__(self, descriptor: ProviderDescriptor):
        self.descriptor = descriptor

    def __repr__(self) -> str:
        return f"ProviderBuilder({self.descriptor.name!r})"

    def __call__(self, args: Sequence[str]) -> IntegrationRecord:
        values = self.parse(args)
        desc = self.descriptor
        return IntegrationRecord(
            name=values["name"],
            destination=_render(desc.destination, values),
            in_rate_limit=desc.in_rate_limit,
            out_rate_limit=desc.out_rate_limit,
            incoming_auth=[_materialize(t, values) for t in desc.incoming_auth],
            outgoing_auth=[_materialize(t, values) for t in desc.outgoing_auth],
        )

    def parse(self, args: Sequence[str]) -> dict[str, str]:
        """Parse and validate flags, returning values keyed by flag dest."""
        namespace = self._parser().parse_args(self._attach_values(args))
        values: dict[str, str] = {}
        missing: list[str] = []
        for flag in self.descriptor.all_flags:
            value = (getattr(namespace, flag.dest) or "").strip()
            if not value and not flag.required and flag.name != "name":
                value = flag.default
            if flag.name == "domain":
                value = normalize_domain(value)
            if not value and (flag.required or flag.name == "name"):
                missing.append(f"-{flag.name}")
            values[flag.dest] = value
        if missing:
            raise ValidationError(
                f"{self.descriptor.name}: missing required flag(s): {', '.join(missing)}"
            )
        return values

    def _attach_values(self, args: Sequence[str]) -> list[str]:
        """Join each known flag with the token after it as `-flag=value`.

        A known flag always consumes the next token, so values that start
        with a dash (`-token -abc`) are kept.
        """
        known = {flag.name for flag in self.descriptor.all_flags}
        joined: list[str] = []
        items = list(args)
        index = 0
        while index < len(items):
            token = items[index]
            if token == "--":
                joined.extend(items[index:])
                break
            name = token[2:] if token.startswith("--") else token[1:]
            if token.startswith("-") and name in known and index + 1 < len(items):
                joined.append(f"{token}={items[index + 1]}")
                index += 2
                continue
            joined.append(token)
            index += 1
        return joined

    def usage(self) -> str:
        parts = []
        for flag in self.descriptor.all_flags:
            token = f"-{flag.name} {flag.dest.upper()}"
            parts.append(token if flag.required else f"[{token}]")
        return f"{self.descriptor.name} {' '.join(parts)}"

    def _parser(self) -> _FlagParser:
        parser = _FlagParser(
            prog=self.descriptor.name,
            add_help=False,
            allow_abbrev=False,
        )
        for flag in self.descriptor.all_flags:
            parser.add_argument(
                f"-{flag.name}",
                f"--{flag.name}",
                dest=flag.dest,
                default=flag.default,
                help=flag.help,
            )
        return parser


def _materialize(template: dict[str, Any], values: dict[str, str]) -> AuthPluginSpec:
    return AuthPluginSpec(
        kind=template["type"],
        params=_render(template.get("params", {}), values),
    )


def _render(value: Any, values: dict[str, str]) -> Any:
    if isinstance(value, str):
        return value.format_map(values)
    if isinstance(value, list):
        return [_render(item, values) for item in value]
    if isinstance(value, dict):
        return {key: _render(item, values) for key, item in value.items()}
    return value
