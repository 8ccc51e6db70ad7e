# sexpr_errors.py
# Source locations and the ParseError taxonomy for the S-expression reader.
#
# =============================================================================
#  ERROR MODEL
# =============================================================================
#
# Every fault the lexer or parser can detect is raised as a ParseError, which
# subclasses the built-in SyntaxError. Each error carries a Location pointing
# at the offending source region; there is no error without one.
#
# The standard SyntaxError attributes (lineno, offset, end_lineno, end_offset,
# text) are filled from the Location so an uncaught error prints with a caret
# under the bad region.
# =============================================================================

from dataclasses import dataclass
from typing import Optional


# ---------------------------------------------------------------------------
# LOCATION RECORD
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Location:
    """
    A start/end line-column range. Lines and columns are 1-based; the end is
    the position just after the last consumed character.
    """
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def point(cls, line: int, column: int) -> "Location":
        return cls(line, column, line, column)

    @property
    def is_point(self) -> bool:
        return self.start_line == self.end_line and self.start_column == self.end_column

    def __str__(self) -> str:
        if self.is_point:
            return f"{self.start_line}:{self.start_column}"
        return f"{self.start_line}:{self.start_column}-{self.end_line}:{self.end_column}"


# ---------------------------------------------------------------------------
# BASE ERROR
# ---------------------------------------------------------------------------
class ParseError(SyntaxError):
    """Raised when source text cannot be read into Model values."""

    def __init__(self, description: str, location: Location, source: Optional[str] = None):
        super().__init__(f"{description} at {location.start_line}:{location.start_column}")
        self.description = description
        self.location = location
        self.lineno = location.start_line
        self.offset = location.start_column
        self.end_lineno = location.end_line
        self.end_offset = location.end_column
        if source is not None:
            self.text = _source_line(source, location.start_line)

    def __str__(self) -> str:
        # the message already names the line and column
        return self.msg


def _source_line(source: str, line: int) -> Optional[str]:
    lines = source.split("\n")
    if 1 <= line <= len(lines):
        return lines[line - 1]
    return None


# ---------------------------------------------------------------------------
# LEXICAL ERRORS
# ---------------------------------------------------------------------------
class UnterminatedString(ParseError):
    """A string literal ran into end of input before its closing quote."""

    def __init__(self, location: Location, source: Optional[str] = None):
        super().__init__("unterminated string", location, source)


class InvalidToken(ParseError):
    """A character that starts no recognized lexeme."""

    def __init__(self, location: Location, source: Optional[str] = None, char: Optional[str] = None):
        desc = "invalid token" if char is None else f"invalid token {char!r}"
        super().__init__(desc, location, source)
        self.char = char


# ---------------------------------------------------------------------------
# STRUCTURAL ERRORS
# ---------------------------------------------------------------------------
class UnexpectedToken(ParseError):
    def __init__(self, expected: str, found: str, location: Location, source: Optional[str] = None):
        super().__init__(f"unexpected {found} - expected {expected}", location, source)
        self.expected = expected
        self.found = found


class UnexpectedEof(ParseError):
    def __init__(self, expected: str, location: Location, source: Optional[str] = None):
        super().__init__(f"unexpected end of input - expected {expected}", location, source)
        self.expected = expected


class InvalidNumber(ParseError):
    """Lexically numeric text that does not convert to a machine number."""

    def __init__(self, text: str, location: Location, source: Optional[str] = None):
        shown = text if len(text) <= 32 else text[:29] + "..."
        super().__init__(f"invalid number '{shown}'", location, source)
        self.raw = text


class UnmatchedParen(ParseError):
    """An opening delimiter was never closed. Points at the earliest one."""

    def __init__(self, location: Location, source: Optional[str] = None):
        super().__init__("unmatched '('", location, source)


class DepthLimitExceeded(ParseError):
    def __init__(self, limit: int, location: Location, source: Optional[str] = None):
        super().__init__(f"nesting depth limit {limit} exceeded", location, source)
        self.limit = limit
