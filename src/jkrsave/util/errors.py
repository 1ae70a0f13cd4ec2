"""Save codec errors.

Every failure of the codec surfaces as a subclass of ``SaveCodecError``
so callers can catch the whole family with a single clause.
"""

from __future__ import annotations


class SaveCodecError(Exception):
    """Base class for all decode/encode failures."""


class FramingError(SaveCodecError):
    """The byte buffer is not valid raw-deflate data or not valid UTF-8."""


class MalformedLiteral(SaveCodecError):
    """The text is not a ``return {...}`` literal or a key is malformed.

    Attributes:
        position: Character offset where the problem was detected.
    """

    def __init__(self, message: str, position: int = 0) -> None:
        super().__init__(f"{message} (at offset {position})")
        self.position = position


class ParseError(SaveCodecError):
    """The table literal is structurally invalid.

    Attributes:
        position: Character offset of the offending token.
        line: 1-based line number.
        column: 1-based column number.
        excerpt: A short slice of the text around ``position``.
    """

    def __init__(self, message: str, text: str, position: int) -> None:
        self.position = position
        self.line = text.count("\n", 0, position) + 1
        self.column = position - (text.rfind("\n", 0, position) + 1) + 1
        self.excerpt = text[max(0, position - 20):position + 20]
        super().__init__(
            f"{message} at line {self.line}, column {self.column}: {self.excerpt!r}"
        )


class EncodeError(SaveCodecError):
    """A value in the tree cannot be written as a Lua literal.

    Attributes:
        path: Location of the offending value, e.g. ``$.cards[2]``.
    """

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{message} at {path}")
        self.path = path
