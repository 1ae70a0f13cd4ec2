"""Save codec — ``.jkr`` bytes to a plain Python tree and back.

Decode path::

    bytes --inflate--> "return {...}" --parse--> keyed tree --promote--> tree

Encode is the mirror image.  Every step is pure; nothing is cached
between calls, so the functions are safe to call from several threads.

The tree is made of ``dict`` (Lua tables with string keys), ``list`` (Lua
tables with keys 1..N), ``str``, ``int``, ``float``, ``bool`` and ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from jkrsave.codec.arrays import demote, promote
from jkrsave.codec.framing import compress, decompress
from jkrsave.codec.lua_table import parse
from jkrsave.codec.lua_writer import dump
from jkrsave.loaders.codec_config_loader import CodecConfig

log = logging.getLogger(__name__)


def loads(text: str, config: Optional[CodecConfig] = None) -> Any:
    """Parse decompressed save text into a tree."""
    config = config or CodecConfig()
    keyed = parse(
        text,
        require_return_prefix=config.require_return_prefix,
        max_depth=config.max_depth,
    )
    return promote(keyed)


def dumps(tree: Any, config: Optional[CodecConfig] = None) -> str:
    """Serialize a tree into save text (not yet compressed)."""
    config = config or CodecConfig()
    return dump(demote(tree, max_depth=config.max_depth))


def decode(data: bytes, config: Optional[CodecConfig] = None) -> Any:
    """Decode the raw bytes of a save file.

    Raises:
        FramingError: not raw-deflate data or not UTF-8.
        MalformedLiteral: missing ``return`` or a malformed key.
        ParseError: structurally invalid table literal.
    """
    tree = loads(decompress(data), config)
    log.debug("Decoded %d bytes into a %s", len(data), type(tree).__name__)
    return tree


def encode(tree: Any, config: Optional[CodecConfig] = None) -> bytes:
    """Encode a tree into the raw bytes of a save file.

    Raises:
        EncodeError: the tree holds something a Lua literal cannot express.
        FramingError: invalid compression level.
    """
    config = config or CodecConfig()
    data = compress(dumps(tree, config), level=config.compression_level)
    log.debug("Encoded a %s into %d bytes", type(tree).__name__, len(data))
    return data
