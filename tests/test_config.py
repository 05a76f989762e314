"""
tests/test_config.py
Config load / save / data-dir resolution.
"""

import json

from guardian.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    load_config,
    resolve_data_dir,
    save_config,
)


class TestConfig:
    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path)
        assert config == DEFAULT_CONFIG
        assert len(config["safe_contacts"]) == 3

    def test_defaults_are_copies(self, tmp_path):
        config = load_config(tmp_path)
        config["safe_contacts"].append({"id": 4})
        assert len(DEFAULT_CONFIG["safe_contacts"]) == 3

    def test_file_overrides_merge(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"port": 8080}), encoding="utf-8")
        config = load_config(tmp_path)
        assert config["port"] == 8080
        assert config["host"] == DEFAULT_CONFIG["host"]

    def test_corrupt_file_falls_back(self, tmp_path, caplog):
        (tmp_path / CONFIG_FILENAME).write_text("{oops", encoding="utf-8")
        assert load_config(tmp_path) == DEFAULT_CONFIG
        assert "Config load failed" in caplog.text

    def test_save_round_trip(self, tmp_path):
        config = load_config(tmp_path)
        config["alert_list_limit"] = 5
        path = save_config(config, tmp_path)
        assert path == tmp_path / CONFIG_FILENAME
        assert load_config(tmp_path)["alert_list_limit"] == 5

    def test_relative_data_dir_under_root(self, tmp_path):
        assert resolve_data_dir({"data_dir": "store"}, tmp_path) == tmp_path / "store"

    def test_absolute_data_dir_kept(self, tmp_path):
        target = tmp_path / "abs"
        assert resolve_data_dir({"data_dir": str(target)}, tmp_path / "other") == target
