"""
Command-line interface for managing gateway integrations.

Uses Typer to expose list/delete/update plus one command per catalog
provider. Provider commands pass their flags (e.g. `-token env:SLACK`)
straight to the provider's builder. Supports loading .env files for the
INTEGRATIONS_* environment variables.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import typer
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from .engine import CrudEngine
from .errors import IntegrationError, UsageError
from .logging_utils import setup_logging
from .providers import PROVIDERS, BuilderRegistry, ProviderBuilder, default_registry
from .store import ConfigStore

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Author the integrations file consumed by the auth gateway.",
)
console = Console(emoji=False)
err_console = Console(stderr=True, emoji=False, soft_wrap=True)

# Provider flags are single-dash long options unknown to click; keep them as-is.
PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}


@dataclass
class CliState:
    config: AppConfig
    registry: BuilderRegistry


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except IntegrationError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=exc.exit_code) from exc


def _out(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _engine(ctx: typer.Context) -> CrudEngine:
    state: CliState = ctx.obj
    store_cfg = state.config.store
    store = ConfigStore(
        store_cfg.path,
        root_key=store_cfg.root_key,
        check_fingerprint=store_cfg.check_fingerprint,
    )
    return CrudEngine(store, state.registry)


@app.callback()
def main(
    ctx: typer.Context,
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        envvar="INTEGRATIONS_FILE",
        help="Integrations YAML file (default: integrations.yaml).",
    ),
    config: Path | None = typer.Option(
        Path(DEFAULT_CONFIG_PATH),
        "--config",
        "-c",
        help="CLI settings YAML file.",
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", envvar="INTEGRATIONS_LOG_LEVEL", help="Logging level."
    ),
    fingerprint_check: bool | None = typer.Option(
        None,
        "--fingerprint-check/--no-fingerprint-check",
        help="Refuse to save if the file changed since it was read.",
    ),
):
    """Manage integration records: list, delete, update, or add via a provider."""
    with _reporting_errors():
        cfg = load_config(str(config) if config else None)

    # Override with CLI options
    if file is not None:
        cfg.store.path = str(file)
    if log_level:
        cfg.logging.level = log_level
    if fingerprint_check is not None:
        cfg.store.check_fingerprint = fingerprint_check

    setup_logging(cfg.logging)
    ctx.obj = CliState(config=cfg, registry=default_registry())


@app.command("list")
def list_integrations(ctx: typer.Context) -> None:
    """Print every integration name in stored order."""
    with _reporting_errors():
        names = _engine(ctx).list_names()
    for name in names:
        _out(name)


@app.command()
def delete(ctx: typer.Context, name: str = typer.Argument(..., help="Integration name.")) -> None:
    """Delete an integration by case-insensitive name."""
    with _reporting_errors():
        removed = _engine(ctx).delete(name)
    if removed:
        _out(f"integration {name.lower()} deleted")
    else:
        _out(f"integration {name.lower()} not found; nothing to delete")


@app.command(context_settings=PASSTHROUGH)
def update(
    ctx: typer.Context,
    provider: str = typer.Argument(..., help="Provider used to build the record."),
) -> None:
    """Build a record with PROVIDER and insert or replace it."""
    with _reporting_errors():
        record, replaced = _engine(ctx).update_from_args(provider, ctx.args)
    _out(f"integration {record.name} {'updated' if replaced else 'added'}")


@app.command()
def show(ctx: typer.Context, name: str = typer.Argument(..., help="Integration name.")) -> None:
    """Print one integration as YAML."""
    with _reporting_errors():
        record = _engine(ctx).get(name)
        if record is None:
            raise UsageError(f"integration {name.lower()} not found")
    _out(yaml.safe_dump(record.to_dict(), sort_keys=False, allow_unicode=True).rstrip())


@app.command()
def providers(ctx: typer.Context) -> None:
    """List the providers that can build integrations."""
    state: CliState = ctx.obj
    table = Table(title="Providers")
    table.add_column("provider", style="cyan", no_wrap=True)
    table.add_column("required flags")
    table.add_column("optional flags")
    table.add_column("destination")
    for name in state.registry.list_names():
        builder = state.registry.get(name)
        if isinstance(builder, ProviderBuilder):
            desc = builder.descriptor
            table.add_row(
                name,
                " ".join(f"-{flag}" for flag in desc.required_flags),
                " ".join(f"-{flag}" for flag in desc.optional_flags),
                desc.destination,
            )
        else:
            table.add_row(name, "", "", "")
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    _out(f"gateway-integrations {__version__}")


def _register_provider_command(name: str, help_text: str) -> None:
    @app.command(name, help=help_text, context_settings=PASSTHROUGH, rich_help_panel="Providers")
    def add(ctx: typer.Context) -> None:
        with _reporting_errors():
            record = _engine(ctx).add_from_args(name, ctx.args)
        _out(f"integration {record.name} added")


for _descriptor in PROVIDERS:
    _register_provider_command(
        _descriptor.name,
        f"Add a {_descriptor.name} integration. Usage: {ProviderBuilder(_descriptor).usage()}",
    )


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    app()


if __name__ == "__main__":
    run()
