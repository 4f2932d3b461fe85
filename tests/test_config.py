"""Tests for configuration loading."""

import pytest

from dtmf_codec.utils.config import DEFAULT_CONFIG_PATH, Config, ConfigurationError


class TestConfig:
    def test_singleton(self):
        assert Config() is Config()

    def test_defaults(self):
        config = Config()
        assert not config.loaded
        config.load_defaults()
        assert config.loaded
        assert config.server.port == 8000
        assert config.detector.batch_size == 102
        assert (config.generator.frame_size, config.generator.tone_ms, config.generator.pause_ms) == (160, 70, 50)
        assert config.logging.output is None
        assert config.streaming.max_chunk_bytes == 65536
        assert config.security.allowed_origins == ["*"]

    def test_custom_file_merged_over_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("generator:\n  tone_ms: 40\nserver:\n  port: 9001\n")
        config = Config()
        config.load(path)
        assert config.generator.tone_ms == 40
        assert config.generator.pause_ms == 50
        assert config.server.port == 9001
        assert config.server.host == "0.0.0.0"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DTMF_API_PORT", "8123")
        monkeypatch.setenv("DTMF_FRAME_SIZE", "80")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        config = Config()
        config.load_defaults()
        assert config.server.port == 8123
        assert config.generator.frame_size == 80
        assert config.logging.level == "DEBUG"

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("DTMF_BATCH_SIZE", "many")
        with pytest.raises(ConfigurationError):
            Config().load_defaults()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Config().load(tmp_path / "missing.yml")

    def test_unsupported_sample_rate(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("detector:\n  sample_rate: 16000\n")
        with pytest.raises(ConfigurationError):
            Config().load(path)

    def test_non_positive_values(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("generator:\n  frame_size: 0\n")
        with pytest.raises(ConfigurationError):
            Config().load(path)

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("server:\n  port: true\n")
        with pytest.raises(ConfigurationError):
            Config().load(path)

    def test_reload(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("generator:\n  pause_ms: 30\n")
        config = Config()
        config.load(path)
        path.write_text("generator:\n  pause_ms: 10\n")
        config.reload()
        assert config.generator.pause_ms == 10

    def test_packaged_defaults_exist(self):
        assert DEFAULT_CONFIG_PATH.exists()
