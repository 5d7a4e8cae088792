"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads YAML files and parses them into the frozen dataclasses of
``ledger_config.schema``.  Internal tooling: runtime callers go through
``ledger_config.get_active_config()``.

Invariants enforced
-------------------
* Override files are deep-merged over the bundled defaults, so an
  override only needs the keys it changes.
* Unknown top-level sections are rejected with ``ValueError``.
* ``compute_checksum`` is deterministic for the same merged mapping.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Non-numeric threshold  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import (
    BudgetConfig,
    DashboardConfig,
    DatabaseConfig,
    LedgerConfig,
    LoggingConfig,
)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

_SECTIONS = frozenset({"database", "budget", "logging", "dashboard"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping")
    return data


def merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _parse_percent(value: Any, key: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"budget.{key} must be numeric (got {value!r})") from None


def parse_config(data: dict[str, Any]) -> LedgerConfig:
    """
    Parse a merged configuration mapping into a LedgerConfig.

    Raises:
        ValueError: on unknown sections or unparseable values.
    """
    unknown = set(data) - _SECTIONS
    if unknown:
        raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")

    db = data.get("database", {})
    budget = data.get("budget", {})
    log = data.get("logging", {})
    dashboard = data.get("dashboard", {})

    timeout = db.get("statement_timeout_ms", 5000)

    return LedgerConfig(
        database=DatabaseConfig(
            url=str(db.get("url", DatabaseConfig.url)),
            echo=bool(db.get("echo", False)),
            pool_size=int(db.get("pool_size", 20)),
            max_overflow=int(db.get("max_overflow", 10)),
            pool_timeout=int(db.get("pool_timeout", 30)),
            pool_recycle=int(db.get("pool_recycle", 1800)),
            statement_timeout_ms=int(timeout) if timeout else None,
        ),
        budget=BudgetConfig(
            warning_percent=_parse_percent(budget.get("warning_percent", "75"), "warning_percent"),
            critical_percent=_parse_percent(budget.get("critical_percent", "90"), "critical_percent"),
        ),
        logging=LoggingConfig(level=str(log.get("level", "INFO")).upper()),
        dashboard=DashboardConfig(recent_limit=int(dashboard.get("recent_limit", 5))),
        checksum=compute_checksum(data),
    )


def load_config(path: Path | None = None, overrides: dict[str, Any] | None = None) -> LedgerConfig:
    """
    Load defaults, then ``path``, then ``overrides``, and parse the result.

    The returned config has not been validated; call ``validate()``.
    """
    data = load_yaml_file(DEFAULTS_PATH)
    if path is not None:
        data = merge(data, load_yaml_file(Path(path)))
    if overrides:
        data = merge(data, overrides)
    return parse_config(data)
