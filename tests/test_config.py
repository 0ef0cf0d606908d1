"""
Unit tests for configuration loading and validation.
"""

import pytest
from tapecut.config import Config, ConfigError


class TestConfig:
    """Test Config loading and bounds."""

    def test_defaults(self):
        config = Config()
        assert config.get("render", "batch_size") == 80
        assert config.get("render", "intermediate_format") == "wav"
        assert config.get("tools", "mixer") == "ecasound"
        assert config.get("tools", "transcoder") == "ffmpeg"
        assert config["silence"]["base_unit_seconds"] == 1.0

    def test_defaults_not_shared(self):
        """Mutating one Config leaves the defaults untouched."""
        config = Config()
        config["render"]["batch_size"] = 5
        assert Config().get("render", "batch_size") == 80

    def test_missing_params_filled(self):
        config = Config({"render": {"batch_size": 10}})
        assert config.get("render", "batch_size") == 10
        assert config.get("render", "scratch_root") == ""
        assert config.get("tools", "mixer") == "ecasound"

    def test_out_of_bounds(self):
        with pytest.raises(ConfigError):
            Config({"render": {"batch_size": 0}})
        with pytest.raises(ConfigError):
            Config({"silence": {"base_unit_seconds": 5.0}})

    def test_wrong_types(self):
        with pytest.raises(ConfigError):
            Config({"render": {"batch_size": 2.5}})
        with pytest.raises(ConfigError):
            Config({"render": {"batch_size": "80"}})
        with pytest.raises(ConfigError):
            Config({"tools": {"mixer": 3}})

    def test_load_missing_file(self, tmp_path):
        """A missing file yields defaults."""
        config = Config.load(str(tmp_path / "nope.toml"))
        assert config.get("render", "batch_size") == 80

    def test_load_file(self, tmp_path):
        path = tmp_path / "tapecut.toml"
        path.write_text('[render]\nbatch_size = 40\n\n[tools]\nmixer = "/opt/bin/ecasound"\ntranscoder = "ffmpeg"\n')

        config = Config.load(str(path))

        assert config.get("render", "batch_size") == 40
        assert config.get("tools", "mixer") == "/opt/bin/ecasound"

    def test_load_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text("[render]\nbatch_size = 12\n")
        monkeypatch.setenv("TAPECUT_CONFIG_PATH", str(path))

        assert Config.load().get("render", "batch_size") == 12

    def test_load_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[render\nbatch_size = ")

        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_example_config_is_valid(self):
        """The shipped example configuration loads cleanly."""
        from pathlib import Path

        example = Path(__file__).resolve().parent.parent / "configs" / "tapecut.toml"
        config = Config.load(str(example))
        assert config.get("render", "batch_size") == 80


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
