"""Save file I/O — reads and writes ``.jkr`` files on disk.

Reading decodes the whole file into a plain tree; writing encodes the tree
first and then replaces the file atomically, so a failed encode never
touches the existing save.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from jkrsave.codec.save_codec import decode, encode
from jkrsave.loaders.codec_config_loader import CodecConfig
from jkrsave.util.constants import SAVE_SUFFIX

log = logging.getLogger(__name__)


# ===================================================================
# Public API
# ===================================================================


async def read_save(path: str | Path, config: Optional[CodecConfig] = None) -> Any:
    """Load and decode a save file.

    Args:
        path: Path to the ``.jkr`` file.
        config: Codec settings (defaults if omitted).

    Returns:
        The decoded tree.

    Raises:
        FileNotFoundError: if the file does not exist.
        SaveCodecError: if the contents cannot be decoded.
    """
    save_file = Path(path)
    if save_file.suffix != SAVE_SUFFIX:
        log.warning("%s does not have the %s suffix", save_file.name, SAVE_SUFFIX)
    data = save_file.read_bytes()
    try:
        tree = decode(data, config)
    except Exception:
        log.exception("Failed to decode save file %s", save_file)
        raise
    log.info("Loaded save %s (%d bytes)", save_file.name, len(data))
    return tree


async def write_save(
    path: str | Path,
    tree: Any,
    config: Optional[CodecConfig] = None,
) -> None:
    """Encode a tree and write it to a save file.

    The data is written to a sibling ``.tmp`` file that then replaces the
    target, keeping the original file name.

    Args:
        path: Output file path.
        tree: The tree to encode.
        config: Codec settings (defaults if omitted).

    Raises:
        EncodeError: if the tree cannot be encoded; nothing is written.
        OSError: if the file cannot be written.
    """
    out = Path(path)
    data = encode(tree, config)

    tmp = out.with_name(out.name + ".tmp")
    try:
        tmp.write_bytes(data)
        tmp.replace(out)
        log.info("Saved %s (%d bytes)", out.name, len(data))
    except Exception:
        log.exception("Failed to write save file %s", out)
        if tmp.exists():
            tmp.unlink(missing_ok=True)
        raise
