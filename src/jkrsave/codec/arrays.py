"""Array promotion and demotion.

Lua has a single table type for both arrays and maps.  On the way in, a
keyed table becomes a Python ``list`` when every key is an
:class:`IndexKey` of 1 or more; any other table becomes a ``dict``.  On the
way out, lists turn back into ``[1]=``, ``[2]=``, ... tables.
"""

from __future__ import annotations

import logging
from typing import Any

from jkrsave.codec.lua_table import IndexKey, Key, StringKey
from jkrsave.util.constants import DEFAULT_MAX_DEPTH, MAX_ARRAY_SLACK
from jkrsave.util.errors import EncodeError

log = logging.getLogger(__name__)


# ===================================================================
# Promotion (keyed tree -> generic tree)
# ===================================================================

def promote(node: Any) -> Any:
    """Turn a keyed tree into plain lists, dicts and scalars.

    A table whose keys are all ``[N]=`` with N >= 1 becomes a list with key
    N at position N - 1; gaps are filled with None.  Every other table
    becomes a dict: string keys stay ``str``, integer keys become ``int``.
    Empty tables are dicts, and so are index tables too sparse to be worth
    a list (see :data:`MAX_ARRAY_SLACK`).
    """
    if not isinstance(node, dict):
        return node

    children = {key: promote(child) for key, child in node.items()}
    if not _is_sequence(children):
        return {_plain_key(key): child for key, child in children.items()}

    size = max(key.index for key in children)
    if size > 2 * len(children) + MAX_ARRAY_SLACK:
        log.debug("Kept sparse table as a mapping: %d entries, largest index %d",
                  len(children), size)
        return {key.index: child for key, child in children.items()}

    items: list[Any] = [None] * size
    for key, child in children.items():
        items[key.index - 1] = child
    if size != len(children):
        log.debug("Promoted sparse table: %d entries over %d slots", len(children), size)
    return items


def _is_sequence(table: dict[Key, Any]) -> bool:
    return bool(table) and all(
        isinstance(key, IndexKey) and key.index >= 1 for key in table
    )


def _plain_key(key: Key) -> str | int:
    if isinstance(key, IndexKey):
        return key.index
    return key.name


# ===================================================================
# Demotion (generic tree -> keyed tree)
# ===================================================================

_SCALARS = (str, int, float, bool, type(None))


def demote(tree: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Turn plain lists and dicts back into a keyed tree.

    List element ``i`` gets key ``[i + 1]``.  Dict keys must be ``str`` or
    non-negative ``int``.

    Raises:
        EncodeError: unsupported value or key type, cyclic reference, or
            nesting deeper than ``max_depth``.
    """
    return _Demoter(max_depth).demote(tree, "$", 0)


class _Demoter:
    """Walks the tree, keeping the containers on the current path."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        self._active: set[int] = set()

    def demote(self, value: Any, path: str, depth: int) -> Any:
        if isinstance(value, _SCALARS):
            return value
        if not isinstance(value, (dict, list, tuple)):
            raise EncodeError(f"Cannot encode value of type {type(value).__name__}", path)
        if depth >= self.max_depth:
            raise EncodeError(f"Tables nested deeper than {self.max_depth}", path)

        marker = id(value)
        if marker in self._active:
            raise EncodeError("Cyclic reference", path)
        self._active.add(marker)
        try:
            if isinstance(value, dict):
                return {
                    _lua_key(key, path): self.demote(child, _child_path(path, key), depth + 1)
                    for key, child in value.items()
                }
            return {
                IndexKey(i + 1): self.demote(child, f"{path}[{i}]", depth + 1)
                for i, child in enumerate(value)
            }
        finally:
            self._active.discard(marker)


def _lua_key(key: Any, path: str) -> Key:
    if isinstance(key, str):
        return StringKey(key)
    # bool is an int subclass but has no Lua key form here
    if isinstance(key, int) and not isinstance(key, bool) and key >= 0:
        return IndexKey(key)
    raise EncodeError(f"Cannot encode table key {key!r}", path)


def _child_path(path: str, key: Any) -> str:
    if isinstance(key, str) and key.isidentifier():
        return f"{path}.{key}"
    return f"{path}[{key!r}]"
