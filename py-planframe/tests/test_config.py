"""Tests for SessionConfig and environment overrides."""

import logging

import pytest

from planframe import Session, SessionConfig, col
from planframe.config import DEFAULT_BATCH_SIZE, DEFAULT_SHOW_ROWS, env_integer

ENV_VARS = [
    "PLANFRAME_TARGET_PARTITIONS",
    "PLANFRAME_BATCH_SIZE",
    "PLANFRAME_MAX_WORKERS",
    "PLANFRAME_SHOW_ROWS",
    "PLANFRAME_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestSessionConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = SessionConfig()
        assert config.batch_size == DEFAULT_BATCH_SIZE
        assert config.show_rows == DEFAULT_SHOW_ROWS
        assert config.target_partitions >= 1
        assert config.log_level is None

    @pytest.mark.parametrize("field", ["target_partitions", "batch_size", "max_workers"])
    def test_positive_fields(self, field):
        with pytest.raises(ValueError, match=field):
            SessionConfig(**{field: 0})

    def test_show_rows_may_be_zero(self):
        assert SessionConfig(show_rows=0).show_rows == 0
        with pytest.raises(ValueError, match="show_rows"):
            SessionConfig(show_rows=-1)


class TestFromEnv:
    """PLANFRAME_* environment variables."""

    def test_reads_variables(self, clean_env):
        clean_env.setenv("PLANFRAME_TARGET_PARTITIONS", "3")
        clean_env.setenv("PLANFRAME_BATCH_SIZE", "512")
        clean_env.setenv("PLANFRAME_SHOW_ROWS", "7")
        config = SessionConfig.from_env()
        assert config.target_partitions == 3
        assert config.batch_size == 512
        assert config.show_rows == 7

    def test_empty_variable_uses_default(self, clean_env):
        clean_env.setenv("PLANFRAME_BATCH_SIZE", "")
        assert SessionConfig.from_env().batch_size == DEFAULT_BATCH_SIZE

    def test_overrides_win(self, clean_env):
        clean_env.setenv("PLANFRAME_SHOW_ROWS", "7")
        assert SessionConfig.from_env(show_rows=3).show_rows == 3

    def test_invalid_integer(self, clean_env):
        clean_env.setenv("PLANFRAME_MAX_WORKERS", "many")
        with pytest.raises(ValueError, match="PLANFRAME_MAX_WORKERS"):
            SessionConfig.from_env()

    def test_env_integer_default(self, clean_env):
        assert env_integer("PLANFRAME_BATCH_SIZE", 5) == 5

    def test_session_show_rows_from_env(self, clean_env, capsys):
        clean_env.setenv("PLANFRAME_SHOW_ROWS", "2")
        with Session() as session:
            session.from_pydict({"x": [1, 2, 3, 4]}).show()
        rows = [line for line in capsys.readouterr().out.splitlines() if line.startswith("| ")]
        assert len(rows) == 1 + 2


class TestLogging:
    """Log level configuration."""

    def test_apply_log_level(self):
        logger = logging.getLogger("planframe")
        previous = logger.level
        try:
            SessionConfig(log_level="debug").apply_logging()
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)

    def test_unknown_log_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            SessionConfig(log_level="chatty").apply_logging()

    def test_bridge_logs_timing(self, r, caplog):
        with caplog.at_level(logging.DEBUG, logger="planframe"):
            r.collect()
        assert any("collect finished" in message for message in caplog.messages)

    def test_engine_logs_scanned_tables(self, r, r2, caplog):
        """Every table under the plan is named in the debug record."""
        joined = r.join(r2, (["id"], ["id"])).filter(col("name") != "z")
        with caplog.at_level(logging.DEBUG, logger="planframe"):
            joined.collect()
        assert "executing plan over r, r2" in caplog.messages
