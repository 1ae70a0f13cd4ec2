"""Codec constants — literal syntax and defaults.

Values shared by the parser, the writer and the config loader.
"""

# -- Lua literal ---------------------------------------------------------

RETURN_KEYWORD: str = "return"
"""Keyword that opens every save document."""

RETURN_PREFIX: str = "return "
"""Exact prefix written in front of the top-level table."""

# -- Framing -------------------------------------------------------------

RAW_DEFLATE_WBITS: int = -15
"""zlib window bits selecting raw deflate (no header, no checksum)."""

DEFAULT_COMPRESSION_LEVEL: int = 9

# -- Limits --------------------------------------------------------------

DEFAULT_MAX_DEPTH: int = 200
"""Maximum table nesting accepted when parsing or encoding."""

MAX_ARRAY_SLACK: int = 16
"""Holes allowed in a promoted list beyond one per present entry.

Index tables sparser than ``2 * entries + MAX_ARRAY_SLACK`` slots stay
int-keyed dicts.
"""

# -- Files ---------------------------------------------------------------

SAVE_SUFFIX: str = ".jkr"
DEFAULT_CODEC_CONFIG_PATH: str = "config/codec.yaml"
