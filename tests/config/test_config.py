"""Tests for configuration loading (ledger_config)."""

from decimal import Decimal

import pytest
import yaml

from ledger_config import get_active_config
from ledger_config.loader import compute_checksum, load_config, merge, parse_config
from ledger_config.schema import LedgerConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("LEDGER_CONFIG", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:
    def test_bundled_defaults(self):
        config = get_active_config()

        assert config.database.url == "sqlite:///ledger.db"
        assert config.database.pool_size == 20
        assert config.budget.warning_percent == Decimal("75")
        assert config.budget.critical_percent == Decimal("90")
        assert config.logging.level == "INFO"
        assert config.dashboard.recent_limit == 5
        assert len(config.checksum) == 64

    def test_config_is_frozen(self):
        config = get_active_config()
        with pytest.raises(AttributeError):
            config.dashboard = None


class TestOverrides:
    def test_override_file_merges_over_defaults(self, tmp_path):
        path = _write_yaml(
            tmp_path / "ledger.yaml",
            {"budget": {"warning_percent": "60"}, "dashboard": {"recent_limit": 10}},
        )

        config = get_active_config(path)

        assert config.budget.warning_percent == Decimal("60")
        assert config.budget.critical_percent == Decimal("90")
        assert config.dashboard.recent_limit == 10
        assert config.database.pool_size == 20

    def test_env_var_names_override_file(self, tmp_path, monkeypatch):
        path = _write_yaml(tmp_path / "env.yaml", {"logging": {"level": "debug"}})
        monkeypatch.setenv("LEDGER_CONFIG", str(path))

        assert get_active_config().logging.level == "DEBUG"

    def test_database_url_env_wins(self, tmp_path, monkeypatch):
        path = _write_yaml(tmp_path / "db.yaml", {"database": {"url": "sqlite:///file.db"}})
        monkeypatch.setenv("DATABASE_URL", "postgresql://ledger@localhost/ledger")

        config = get_active_config(path)

        assert config.database.url == "postgresql://ledger@localhost/ledger"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_non_mapping_document_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            get_active_config(path)


class TestValidation:
    @pytest.mark.parametrize(
        "warning, critical",
        [("90", "75"), ("75", "75"), ("0", "90"), ("75", "101")],
    )
    def test_invalid_thresholds_rejected(self, tmp_path, warning, critical):
        path = _write_yaml(
            tmp_path / "bad.yaml",
            {"budget": {"warning_percent": warning, "critical_percent": critical}},
        )
        with pytest.raises(ValueError, match="thresholds"):
            get_active_config(path)

    def test_non_numeric_threshold_rejected(self, tmp_path):
        path = _write_yaml(tmp_path / "bad.yaml", {"budget": {"warning_percent": "lots"}})
        with pytest.raises(ValueError, match="numeric"):
            get_active_config(path)

    def test_unknown_section_rejected(self, tmp_path):
        path = _write_yaml(tmp_path / "bad.yaml", {"metrics": {"enabled": True}})
        with pytest.raises(ValueError, match="Unknown configuration sections"):
            get_active_config(path)

    def test_non_positive_recent_limit_rejected(self):
        LedgerConfig().validate()
        bad = parse_config({"dashboard": {"recent_limit": 0}})
        with pytest.raises(ValueError, match="recent_limit"):
            bad.validate()


class TestLoaderHelpers:
    def test_merge_is_recursive_and_non_destructive(self):
        base = {"database": {"url": "a", "echo": False}}
        merged = merge(base, {"database": {"echo": True}})

        assert merged == {"database": {"url": "a", "echo": True}}
        assert base["database"]["echo"] is False

    def test_checksum_is_deterministic(self):
        first = compute_checksum({"b": 1, "a": {"y": 2, "x": 3}})
        second = compute_checksum({"a": {"x": 3, "y": 2}, "b": 1})
        assert first == second
        assert first != compute_checksum({"a": 1})

    def test_overrides_change_checksum(self):
        base = load_config()
        changed = load_config(overrides={"dashboard": {"recent_limit": 7}})
        assert base.checksum != changed.checksum

    def test_trace_logged(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_CONFIG_TRACE"]
        assert traces
        assert traces[-1]["checksum"] == config.checksum
