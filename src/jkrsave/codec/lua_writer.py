"""Lua table writer — serializes a keyed tree as ``return {...}``.

Produces the same shape the game writes itself: bracketed keys, no
whitespace, and a comma after every entry::

    return {["name"]="Jimbo",["cards"]={[1]="H_A",[2]="S_K",},}
"""

from __future__ import annotations

import math
import re
from typing import Any

from jkrsave.codec.lua_table import IndexKey, Key
from jkrsave.util.constants import RETURN_PREFIX
from jkrsave.util.errors import EncodeError

# Characters escaped the way string.format("%q") escapes them
_QUOTED = re.compile(r'[\\"\n\r\0]')
_QUOTE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\\n",
    "\r": "\\r",
    "\0": "\\000",
}


def dump(tree: Any) -> str:
    """Serialize a keyed tree into a ``return {...}`` document."""
    out = [RETURN_PREFIX]
    _write_value(tree, out)
    return "".join(out)


def quote(text: str) -> str:
    """Quote a string as a Lua double-quoted literal."""
    return '"' + _QUOTED.sub(lambda m: _QUOTE_ESCAPES[m.group()], text) + '"'


def format_number(value: int | float) -> str:
    """Format a number as a Lua numeral."""
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return repr(value)


def _write_value(value: Any, out: list[str]) -> None:
    if isinstance(value, dict):
        _write_table(value, out)
    elif isinstance(value, bool):
        out.append("true" if value else "false")
    elif isinstance(value, (int, float)):
        out.append(format_number(value))
    elif isinstance(value, str):
        out.append(quote(value))
    elif value is None:
        out.append("nil")
    else:
        raise EncodeError(f"Cannot write value of type {type(value).__name__}")


def _write_table(table: dict[Key, Any], out: list[str]) -> None:
    out.append("{")
    for key, value in table.items():
        if isinstance(key, IndexKey):
            out.append(f"[{key.index}]=")
        else:
            out.append(f"[{quote(key.name)}]=")
        _write_value(value, out)
        out.append(",")
    out.append("}")
