"""Tests for codec_config_loader — ensures codec settings load correctly."""

from pathlib import Path

import pytest

from jkrsave.loaders.codec_config_loader import CodecConfig, load_codec_config
from jkrsave.util.constants import DEFAULT_COMPRESSION_LEVEL, DEFAULT_MAX_DEPTH

# Path to the shipped config directory
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class TestDefaults:
    def test_dataclass_defaults(self):
        cfg = CodecConfig()
        assert cfg.compression_level == DEFAULT_COMPRESSION_LEVEL
        assert cfg.require_return_prefix is True
        assert cfg.max_depth == DEFAULT_MAX_DEPTH

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_codec_config(tmp_path / "nonexistent.yaml") == CodecConfig()

    def test_empty_file_returns_defaults(self, tmp_path):
        f = tmp_path / "codec.yaml"
        f.write_text("")
        assert load_codec_config(f) == CodecConfig()


class TestLoadFromFile:
    def test_shipped_config_loads(self):
        f = CONFIG_DIR / "codec.yaml"
        assert f.exists(), f"Missing config file: {f}"
        cfg = load_codec_config(f)
        assert isinstance(cfg, CodecConfig)
        assert 0 <= cfg.compression_level <= 9

    def test_values_override_defaults(self, tmp_path):
        f = tmp_path / "codec.yaml"
        f.write_text("compression_level: 1\nrequire_return_prefix: false\n")
        cfg = load_codec_config(f)
        assert cfg.compression_level == 1
        assert cfg.require_return_prefix is False
        assert cfg.max_depth == DEFAULT_MAX_DEPTH

    def test_unknown_keys_ignored(self, tmp_path):
        f = tmp_path / "codec.yaml"
        f.write_text("max_depth: 50\nspeed: ludicrous\n")
        assert load_codec_config(f) == CodecConfig(max_depth=50)

    def test_config_is_immutable(self):
        cfg = CodecConfig()
        with pytest.raises(AttributeError):
            cfg.max_depth = 1
