"""
Configuration management using YAML files and dataclasses.

Configuration sections:
- StoreConfig: Backing integrations file settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container

Values from the config file override the dataclass defaults; CLI options
and environment variables override the config file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import UsageError

DEFAULT_CONFIG_PATH = "integrations-cli.yaml"


@dataclass
class StoreConfig:
    """Configuration for the integrations file.

    Attributes:
        path: Path to the YAML file holding the integration records
        root_key: Top-level key whose value is the record list
        check_fingerprint: Reject saves if the file changed since it was loaded
    """

    path: str = "integrations.yaml"
    root_key: str = "integrations"
    check_fingerprint: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to the console (stderr)
        file: Whether to log to a file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "integrations.log.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    A missing file at the default location is not an error; an explicitly
    named file must exist.
    """
    if not path:
        return AppConfig()
    config_path = Path(path)
    if not config_path.exists() and path == DEFAULT_CONFIG_PATH:
        return AppConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise UsageError(f"cannot load config {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise UsageError(f"config {path}: top level must be a mapping")

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig, ignoring unknown keys.

    Known keys must hold a value of the same type as the default.
    """
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data or not isinstance(value, dict):
            continue
        for name, item in value.items():
            if name not in data[key]:
                continue
            expected = type(data[key][name])
            if not isinstance(item, expected):
                raise UsageError(
                    f"config {key}.{name}: expected {expected.__name__}, "
                    f"got {type(item).__name__}"
                )
            data[key][name] = item
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    return {
        "store": {
            "path": cfg.store.path,
            "root_key": cfg.store.root_key,
            "check_fingerprint": cfg.store.check_fingerprint,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    return AppConfig(
        store=StoreConfig(**data["store"]),
        logging=LoggingConfig(**data["logging"]),
    )
