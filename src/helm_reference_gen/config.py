"""Generator configuration and logging setup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - python<3.11
    import tomli as tomllib

from helm_reference_gen.splice import DEFAULT_END_MARKER, DEFAULT_START_MARKER

_LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class GeneratorConfig:
    """Settings for a docs generation run."""

    values: Path | None = None
    output: Path | None = None
    start_marker: str = DEFAULT_START_MARKER
    end_marker: str = DEFAULT_END_MARKER
    log_level: str = "info"


def load_config(path: str | Path) -> GeneratorConfig:
    """Load generator settings from *path*, resolving paths against its directory."""
    config_path = Path(path)
    with config_path.open("rb") as handle:
        raw = tomllib.load(handle)

    docs = _table(raw, "docs")
    logging_table = _table(raw, "logging")
    base = config_path.resolve().parent

    config = GeneratorConfig()
    values = _optional_str(docs, "values", "docs")
    if values is not None:
        config.values = base / values
    output = _optional_str(docs, "output", "docs")
    if output is not None:
        config.output = base / output
    config.start_marker = _optional_str(docs, "start-marker", "docs") or config.start_marker
    config.end_marker = _optional_str(docs, "end-marker", "docs") or config.end_marker
    config.log_level = _optional_str(logging_table, "level", "logging") or config.log_level
    return config


def configure_logging(level: str) -> None:
    """Configure root logging at *level* (``trace``, ``debug``, ``info``, ...)."""
    numeric = _LOG_LEVELS.get(level.lower())
    if numeric is None:
        raise ValueError(f"unknown log level: {level}")
    logging.basicConfig(level=numeric, format="%(levelname)s %(name)s: %(message)s", force=True)


def _table(raw: dict[str, Any], name: str) -> dict[str, Any]:
    table = raw.get(name, {})
    if not isinstance(table, dict):
        raise ValueError(f"config {name} must be a table")
    return table


def _optional_str(table: dict[str, Any], key: str, table_name: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"config {table_name} {key} must be a string")
    return value
