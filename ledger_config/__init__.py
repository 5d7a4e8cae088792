"""
ledger_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files or environment variables directly.

Architecture position:
    Configuration.  Sits beside ``ledger_kernel`` and below
    ``ledger_services``.  The kernel MUST NEVER import from
    ``ledger_config``; ``ledger_services`` translates config values into
    kernel inputs (engine URL, BudgetThresholds).

Resolution order (later wins):
    1. bundled ``defaults.yaml``
    2. the YAML file at ``config_path``, else at ``$LEDGER_CONFIG``
    3. ``$DATABASE_URL`` for ``database.url``

Failure modes:
    - ``FileNotFoundError`` -- an explicit or $LEDGER_CONFIG path is missing.
    - ``ValueError`` -- unknown sections, unparseable values, or thresholds
      outside 0 < warning < critical <= 100.

Audit relevance:
    Every successful call emits a ``LEDGER_CONFIG_TRACE`` log entry with the
    checksum of the merged configuration.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ledger_config.loader import load_config
from ledger_config.schema import (
    BudgetConfig,
    DashboardConfig,
    DatabaseConfig,
    LedgerConfig,
    LoggingConfig,
)

_logger = logging.getLogger("ledger_kernel.config")

CONFIG_ENV_VAR = "LEDGER_CONFIG"
DATABASE_URL_ENV_VAR = "DATABASE_URL"


def get_active_config(config_path: Path | str | None = None) -> LedgerConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Optional YAML override file.  Falls back to
            ``$LEDGER_CONFIG`` when omitted.

    Returns:
        A validated, frozen LedgerConfig.

    Raises:
        FileNotFoundError: If the override file does not exist.
        ValueError: If validation fails.
    """
    path = config_path or os.environ.get(CONFIG_ENV_VAR) or None

    overrides = {}
    database_url = os.environ.get(DATABASE_URL_ENV_VAR)
    if database_url:
        overrides["database"] = {"url": database_url}

    config = load_config(Path(path) if path else None, overrides)
    config.validate()

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "config_path": str(path) if path else None,
            "checksum": config.checksum,
            "warning_percent": config.budget.warning_percent,
            "critical_percent": config.budget.critical_percent,
        },
    )
    return config


__all__ = [
    "BudgetConfig",
    "DashboardConfig",
    "DatabaseConfig",
    "LedgerConfig",
    "LoggingConfig",
    "get_active_config",
]
