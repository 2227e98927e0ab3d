"""Config tests"""

import importlib
import os
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def restore_config():
    """Reload config from the real environment after each test."""
    yield
    import fitconnect.config as config_module
    importlib.reload(config_module)


def reload_config_with_env(env_vars: dict):
    """Reload the config module under the given environment.

    dotenv.load_dotenv is patched so a local .env is not read.
    """
    with patch.dict(os.environ, env_vars, clear=True):
        with patch("dotenv.load_dotenv"):
            import fitconnect.config as config_module
            importlib.reload(config_module)
            return config_module


class TestDefaults:
    def test_resume_defaults(self):
        config_module = reload_config_with_env({})
        resume = config_module.Config.resume

        assert resume.debounce_ms == 2000
        assert resume.settle_ms == 100
        assert resume.fast_delay_ms == 100
        assert resume.background_delay_ms == 3000
        assert resume.native_focus_quiet_ms == 1000
        assert resume.handler_timeout_ms == 0

    def test_batch_defaults(self):
        config_module = reload_config_with_env({})
        batch = config_module.Config.batch

        assert batch.feature_flag == "BATCH_OPERATIONS"
        assert batch.operation_timeout_ms == 0
        assert batch.unknown_name == "Unknown"

    def test_validate_passes_with_defaults(self):
        config_module = reload_config_with_env({})
        config_module.Config.validate()


class TestEnvironment:
    def test_overrides(self):
        config_module = reload_config_with_env({
            "RESUME_DEBOUNCE_MS": "1500",
            "BATCH_FEATURE_FLAG": "COACH_BULK",
            "DEBUG": "true",
        })
        assert config_module.Config.resume.debounce_ms == 1500
        assert config_module.Config.batch.feature_flag == "COACH_BULK"
        assert config_module.Config.debug is True

    def test_paths(self, tmp_path):
        config_module = reload_config_with_env({"STORE_PATH": str(tmp_path)})
        assert config_module.Config.get_store_path() == str(tmp_path)
        assert config_module.Config.get_log_path().endswith("logs")


class TestValidation:
    def test_negative_timing(self):
        config_module = reload_config_with_env({"RESUME_SETTLE_MS": "-5"})

        with pytest.raises(config_module.ConfigurationError) as exc_info:
            config_module.Config.validate()

        assert "RESUME_SETTLE_MS" in str(exc_info.value)
        assert exc_info.value.missing_vars == ["RESUME_SETTLE_MS"]

    def test_empty_flag_name(self):
        config_module = reload_config_with_env({"BATCH_FEATURE_FLAG": ""})

        with pytest.raises(config_module.ConfigurationError) as exc_info:
            config_module.Config.validate()

        assert "BATCH_FEATURE_FLAG" in str(exc_info.value)
