"""Feature flag tests"""

import logging

import pytest
import yaml

from fitconnect.flags import FeatureFlags, load_flag_file


@pytest.fixture()
def flag_file(tmp_path):
    def _write(content):
        p = tmp_path / "flags.yaml"
        p.write_text(yaml.dump(content), encoding="utf-8")
        return p

    return _write


class TestLoadFlagFile:
    def test_missing_file(self, tmp_path):
        assert load_flag_file(tmp_path / "none.yaml") == {}

    def test_names_are_upper_cased(self, flag_file):
        assert load_flag_file(flag_file({"batch_operations": True})) == {
            "BATCH_OPERATIONS": True
        }

    def test_non_mapping_root(self, flag_file, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_flag_file(flag_file(["BATCH_OPERATIONS"])) == {}
        assert "not a mapping" in caplog.text

    def test_non_bool_values_skipped(self, flag_file, caplog):
        with caplog.at_level(logging.WARNING):
            flags = load_flag_file(flag_file({"A": "yes", "B": False}))
        assert flags == {"B": False}
        assert "not a bool" in caplog.text


class TestFeatureFlags:
    def test_unknown_flag_is_disabled(self):
        assert FeatureFlags(environ={}).is_enabled("BATCH_OPERATIONS") is False

    def test_lookup_is_case_insensitive(self):
        flags = FeatureFlags({"Batch_Operations": True}, environ={})
        assert flags.is_enabled("batch_operations") is True

    @pytest.mark.parametrize(
        "env_value, expected",
        [("true", True), ("TRUE", True), ("false", False), ("0", False)],
    )
    def test_env_override_wins(self, env_value, expected):
        flags = FeatureFlags(
            {"BATCH_OPERATIONS": not expected},
            environ={"FEATURE_BATCH_OPERATIONS": env_value},
        )
        assert flags.is_enabled("BATCH_OPERATIONS") is expected

    def test_empty_env_value_ignored(self):
        flags = FeatureFlags(
            {"BATCH_OPERATIONS": True}, environ={"FEATURE_BATCH_OPERATIONS": ""}
        )
        assert flags.is_enabled("BATCH_OPERATIONS") is True

    def test_from_file(self, flag_file):
        flags = FeatureFlags.from_file(flag_file({"BATCH_OPERATIONS": True}), environ={})
        assert flags.is_enabled("BATCH_OPERATIONS") is True

    def test_runtime_set(self):
        flags = FeatureFlags(environ={})
        flags.set("batch_operations", True)
        assert flags.is_enabled("BATCH_OPERATIONS") is True
