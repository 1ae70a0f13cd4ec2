"""Lua table literal — key types and parser.

Save documents are a single ``return {...}`` statement whose tables use
explicit bracketed keys only:

- ``["name"]=value`` for string keys
- ``[N]=value`` for integer keys

Values are quoted strings, numbers, ``true``/``false``/``nil`` or nested
tables.  Every entry is followed by a comma, including the last one.

The parser builds a *keyed tree*: plain dicts whose keys are
:class:`StringKey` or :class:`IndexKey`.  Whether a table is an array is
decided later, by :mod:`jkrsave.codec.arrays`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Union

from jkrsave.util.constants import DEFAULT_MAX_DEPTH, RETURN_KEYWORD
from jkrsave.util.errors import MalformedLiteral, ParseError

log = logging.getLogger(__name__)


# ===================================================================
# Keys
# ===================================================================

@dataclass(frozen=True)
class StringKey:
    """A ``["name"]=`` key."""
    name: str


@dataclass(frozen=True)
class IndexKey:
    """A ``[N]=`` key.  Lua arrays start at 1."""
    index: int


Key = Union[StringKey, IndexKey]


# ===================================================================
# Lexical helpers
# ===================================================================

_SPACE = " \t\n\r\f\v"
_WHITESPACE = re.compile(r"[ \t\n\r\f\v]*")
_DIGITS = re.compile(r"[0-9]+")
_NUMBER = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NAME = re.compile(r"-?[A-Za-z_][A-Za-z0-9_]*")
_PLAIN_RUN = {
    '"': re.compile(r'[^"\\\n\r]*'),
    "'": re.compile(r"[^'\\\n\r]*"),
}

_WORDS: dict[str, Any] = {
    "true": True,
    "false": False,
    "nil": None,
    # tostring() of non-finite numbers
    "inf": float("inf"),
    "-inf": float("-inf"),
    "nan": float("nan"),
    "-nan": float("nan"),
}

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "\n": "\n",
    "\r": "\n",
}


# ===================================================================
# Public API
# ===================================================================

def parse(
    text: str,
    require_return_prefix: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Parse a ``return {...}`` document into a keyed tree.

    Args:
        text: The decompressed save text.
        require_return_prefix: Reject documents that do not start with
            ``return``.  When False a bare table literal is accepted too.
        max_depth: Deepest table nesting accepted.

    Returns:
        A dict keyed by :class:`StringKey`/:class:`IndexKey` (or a scalar
        if the document returns one).

    Raises:
        MalformedLiteral: missing prefix or malformed bracketed key.
        ParseError: any other structural problem.
    """
    return _Parser(text, max_depth).document(require_return_prefix)


# ===================================================================
# Parser
# ===================================================================

class _Parser:
    """Recursive-descent parser over a single document."""

    def __init__(self, text: str, max_depth: int) -> None:
        self.text = text
        self.pos = 0
        self.max_depth = max_depth
        self.tables = 0

    # -- Document --------------------------------------------------------

    def document(self, require_return_prefix: bool) -> Any:
        self._skip_ws()
        if self._at_return():
            self.pos += len(RETURN_KEYWORD)
        elif require_return_prefix:
            raise MalformedLiteral("Document does not start with 'return'", self.pos)

        value = self._value(depth=0)
        self._skip_ws()
        if self.pos != len(self.text):
            raise self._error("Unexpected data after the top-level value")
        log.debug("Parsed %d tables from %d characters", self.tables, len(self.text))
        return value

    def _at_return(self) -> bool:
        if not self.text.startswith(RETURN_KEYWORD, self.pos):
            return False
        after = self.pos + len(RETURN_KEYWORD)
        return after < len(self.text) and self.text[after] in _SPACE + "{"

    # -- Tables ----------------------------------------------------------

    def _table(self, depth: int) -> dict[Key, Any]:
        start = self.pos
        if depth > self.max_depth:
            raise self._error(f"Tables nested deeper than {self.max_depth}")
        self.pos += 1  # '{'
        self.tables += 1
        entries: dict[Key, Any] = {}

        while True:
            self._skip_ws()
            if self.pos >= len(self.text):
                raise self._error("Unterminated table", start)
            if self.text[self.pos] == "}":
                self.pos += 1
                return entries

            key = self._key()
            self._skip_ws()
            if not self.text.startswith("=", self.pos):
                raise MalformedLiteral("Expected '=' after key", self.pos)
            self.pos += 1
            entries[key] = self._value(depth)

            self._skip_ws()
            if self.text.startswith((",", ";"), self.pos):
                self.pos += 1
            elif not self.text.startswith("}", self.pos):
                raise self._error("Expected ',' or '}' after table entry")

    def _key(self) -> Key:
        start = self.pos
        if self.text[self.pos] in ",;":
            raise self._error("Empty table entry")
        if self.text[self.pos] != "[":
            raise MalformedLiteral("Expected a bracketed key", start)
        self.pos += 1
        self._skip_ws()

        digits = _DIGITS.match(self.text, self.pos)
        if digits:
            key: Key = IndexKey(int(digits.group()))
            self.pos = digits.end()
        elif self.text.startswith(('"', "'"), self.pos):
            key = StringKey(self._string())
        else:
            raise MalformedLiteral("Bracketed key is neither a string nor an integer", start)

        self._skip_ws()
        if not self.text.startswith("]", self.pos):
            raise MalformedLiteral("Unterminated bracketed key", start)
        self.pos += 1
        return key

    # -- Values ----------------------------------------------------------

    def _value(self, depth: int) -> Any:
        self._skip_ws()
        if self.pos >= len(self.text):
            raise self._error("Expected a value")
        ch = self.text[self.pos]

        if ch == "{":
            return self._table(depth + 1)
        if ch in "\"'":
            return self._string()

        word = _NAME.match(self.text, self.pos)
        if word:
            if word.group() not in _WORDS:
                raise self._error(f"Unexpected name {word.group()!r}")
            self.pos = word.end()
            return _WORDS[word.group()]

        number = _NUMBER.match(self.text, self.pos)
        if number:
            self.pos = number.end()
            literal = number.group()
            if any(c in literal for c in ".eE"):
                return float(literal)
            return int(literal)

        raise self._error(f"Unexpected character {ch!r}")

    def _string(self) -> str:
        start = self.pos
        quote = self.text[self.pos]
        plain = _PLAIN_RUN[quote]
        self.pos += 1
        chunks: list[str] = []
        # \ddd and \xhh stand for bytes; a run of them is decoded as UTF-8
        pending = bytearray()
        pending_at = start

        while True:
            run = plain.match(self.text, self.pos)
            if run.end() > self.pos:
                chunks.append(self._utf8(pending, pending_at))
                chunks.append(run.group())
            self.pos = run.end()
            if self.pos >= len(self.text) or self.text[self.pos] in "\n\r":
                raise self._error("Unterminated string", start)
            if self.text[self.pos] == quote:
                self.pos += 1
                chunks.append(self._utf8(pending, pending_at))
                return "".join(chunks)

            escape_at = self.pos
            escaped = self._escape()
            if isinstance(escaped, int):
                if not pending:
                    pending_at = escape_at
                pending.append(escaped)
            elif escaped:
                chunks.append(self._utf8(pending, pending_at))
                chunks.append(escaped)

    def _utf8(self, pending: bytearray, position: int) -> str:
        try:
            text = pending.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise self._error("Escaped bytes are not valid UTF-8", position) from exc
        pending.clear()
        return text

    def _escape(self) -> str | int:
        """Decode one escape: a str, or an int for a byte escape."""
        start = self.pos
        self.pos += 1
        if self.pos >= len(self.text):
            raise self._error("Unterminated escape sequence", start)
        ch = self.text[self.pos]

        if ch in _ESCAPES:
            self.pos += 1
            if ch == "\r" and self.text.startswith("\n", self.pos):
                self.pos += 1
            return _ESCAPES[ch]
        if ch in "0123456789":
            digits = _DIGITS.match(self.text, self.pos, self.pos + 3).group()
            if int(digits) > 255:
                raise self._error("Decimal escape too large", start)
            self.pos += len(digits)
            return int(digits)
        if ch == "x":
            hex_digits = self.text[self.pos + 1:self.pos + 3]
            if len(hex_digits) != 2 or not all(c in "0123456789abcdefABCDEF" for c in hex_digits):
                raise self._error("Invalid hexadecimal escape", start)
            self.pos += 3
            return int(hex_digits, 16)
        if ch == "z":
            self.pos += 1
            self._skip_ws()
            return ""
        raise self._error(f"Invalid escape sequence '\\{ch}'", start)

    # -- Utilities -------------------------------------------------------

    def _skip_ws(self) -> None:
        self.pos = _WHITESPACE.match(self.text, self.pos).end()

    def _error(self, message: str, position: int | None = None) -> ParseError:
        return ParseError(message, self.text, self.pos if position is None else position)
