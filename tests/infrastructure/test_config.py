"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stockflow.infrastructure.config import Settings

_VARIABLES = (
    "API_URL", "CONSUMER_KEY", "CONSUMER_SECRET", "TIMEOUT",
    "MAX_WORKERS", "DATA_DIR", "LOG_LEVEL",
)


@pytest.fixture
def env(monkeypatch, tmp_path):
    # Run from an empty directory so a developer's .env is not picked up.
    monkeypatch.chdir(tmp_path)
    for name in _VARIABLES:
        monkeypatch.delenv(f"STOCKFLOW_{name}", raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self, env):
        settings = Settings()

        assert settings.api_url == ""
        assert settings.uses_upstream is False
        assert settings.timeout == 10.0
        assert settings.max_workers == 8
        assert settings.log_level == "INFO"
        assert settings.data_dir.name == "data"

    def test_reads_environment(self, env):
        env.setenv("STOCKFLOW_API_URL", " https://shop.test/wp-json/stockflow/v1 ")
        env.setenv("STOCKFLOW_CONSUMER_KEY", "ck")
        env.setenv("STOCKFLOW_CONSUMER_SECRET", "cs")
        env.setenv("STOCKFLOW_TIMEOUT", "2.5")
        env.setenv("STOCKFLOW_MAX_WORKERS", "3")
        env.setenv("STOCKFLOW_DATA_DIR", "/srv/stockflow")
        env.setenv("STOCKFLOW_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.api_url == "https://shop.test/wp-json/stockflow/v1"
        assert settings.uses_upstream is True
        assert settings.consumer_key == "ck"
        assert settings.timeout == 2.5
        assert settings.max_workers == 3
        assert settings.data_dir == Path("/srv/stockflow")
        assert settings.log_level == "DEBUG"

    def test_worker_count_has_floor(self, env):
        env.setenv("STOCKFLOW_MAX_WORKERS", "0")
        assert Settings().max_workers == 1

    def test_empty_data_dir_uses_default(self, env):
        env.setenv("STOCKFLOW_DATA_DIR", "")
        assert Settings().data_dir.name == "data"

    def test_reads_dotenv_file(self, env, tmp_path):
        (tmp_path / ".env").write_text("STOCKFLOW_TIMEOUT=4\nUNRELATED=1\n")
        assert Settings().timeout == 4.0

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_bad_timeout_is_rejected(self, env, value):
        env.setenv("STOCKFLOW_TIMEOUT", value)
        with pytest.raises(ValidationError, match="timeout"):
            Settings()

    def test_bad_worker_count_is_rejected(self, env):
        env.setenv("STOCKFLOW_MAX_WORKERS", "many")
        with pytest.raises(ValidationError, match="max_workers"):
            Settings()
