"""Codec configuration — loads tunable codec settings from config/codec.yaml.

Provides a single ``CodecConfig`` dataclass that callers load once and
pass to ``decode``/``encode`` (or the file helpers).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from jkrsave.util.constants import (
    DEFAULT_CODEC_CONFIG_PATH,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_MAX_DEPTH,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodecConfig:
    """All tunable codec settings.

    Loaded from ``config/codec.yaml``.  Every field has a sensible default
    so the codec works without the file.
    """

    # -- Framing -----------------------------------------------------
    compression_level: int = DEFAULT_COMPRESSION_LEVEL

    # -- Parsing -----------------------------------------------------
    require_return_prefix: bool = True

    # -- Limits ------------------------------------------------------
    max_depth: int = DEFAULT_MAX_DEPTH


def load_codec_config(path: str | Path = DEFAULT_CODEC_CONFIG_PATH) -> CodecConfig:
    """Load codec configuration from a YAML file.

    Missing keys fall back to dataclass defaults.  If the file does not
    exist, a warning is logged and pure defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Codec config not found at %s — using defaults", p)
        return CodecConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded codec config from %s (%d keys)", p, len(raw))

    unknown = sorted(k for k in raw if k not in CodecConfig.__dataclass_fields__)
    if unknown:
        log.warning("Ignoring unknown codec config keys: %s", ", ".join(unknown))

    return CodecConfig(**{
        k: v for k, v in raw.items()
        if k in CodecConfig.__dataclass_fields__
    })
