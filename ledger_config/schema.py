"""
Ledger configuration schema.

Frozen dataclasses produced by ``ledger_config.loader`` from YAML.  They
carry values only; ``LedgerConfig.validate()`` checks cross-field rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class DatabaseConfig:
    """Engine settings passed to ledger_kernel.db.init_engine_from_url()."""

    url: str = "sqlite:///ledger.db"
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800
    statement_timeout_ms: int | None = 5000


@dataclass(frozen=True)
class BudgetConfig:
    """Usage band boundaries, in percent."""

    warning_percent: Decimal = Decimal("75")
    critical_percent: Decimal = Decimal("90")


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class DashboardConfig:
    recent_limit: int = 5


@dataclass(frozen=True)
class LedgerConfig:
    """Root configuration object returned by get_active_config()."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    checksum: str = ""

    def validate(self) -> None:
        """
        Check cross-field rules.

        Raises:
            ValueError: If thresholds are not 0 < warning < critical <= 100,
                or a pool/limit setting is not positive.
        """
        warning = self.budget.warning_percent
        critical = self.budget.critical_percent
        if not (Decimal("0") < warning < critical <= Decimal("100")):
            raise ValueError(
                "budget thresholds must satisfy 0 < warning_percent < "
                f"critical_percent <= 100 (got {warning}, {critical})"
            )
        if self.database.pool_size <= 0:
            raise ValueError(f"database.pool_size must be positive (got {self.database.pool_size})")
        if self.dashboard.recent_limit <= 0:
            raise ValueError(
                f"dashboard.recent_limit must be positive (got {self.dashboard.recent_limit})"
            )
