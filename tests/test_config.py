"""Tests for YAML configuration loading."""

import os

import yaml

from shapesnap.config import EngineConfig, load_config, save_default_config


class TestLoadConfig:
    """Tests for config defaults and overrides."""

    def test_missing_file_gives_defaults(self, temp_dir):
        config = load_config(os.path.join(temp_dir, "nope.yaml"))

        assert config == EngineConfig()
        assert config.recognition.min_points == 10
        assert config.recognition.straw_ratio == 0.95
        assert config.hit_test.threshold == 10.0
        assert config.oracle.enabled is False

    def test_no_path_gives_defaults(self):
        assert load_config() == EngineConfig()

    def test_yaml_overrides(self, temp_dir):
        """Test that YAML values replace only the keys they name."""
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({
                "recognition": {"line_ratio": 0.9, "not_a_key": 1},
                "oracle": {"enabled": True, "policy": "confirm"},
                "unknown_section": {"x": 1},
                "debug": "not a mapping",
            }, f)

        config = load_config(path)

        assert config.recognition.line_ratio == 0.9
        assert config.recognition.closure_ratio == 0.3
        assert not hasattr(config.recognition, "not_a_key")
        assert config.oracle.enabled is True
        assert config.oracle.policy == "confirm"
        assert config.debug.enabled is False

    def test_empty_file(self, temp_dir):
        path = os.path.join(temp_dir, "empty.yaml")
        open(path, "w").close()

        assert load_config(path) == EngineConfig()


class TestSaveDefaultConfig:
    """Tests for writing the default config."""

    def test_round_trip(self, temp_dir):
        path = os.path.join(temp_dir, "default.yaml")

        save_default_config(path)

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        assert set(data) == {"recognition", "hit_test", "oracle", "tracing", "debug"}
        assert data["recognition"]["triangle_area_ratio"] == 0.65
        assert load_config(path) == EngineConfig()
