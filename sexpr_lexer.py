# sexpr_lexer.py
# Tokenizer for the S-expression reader.
#
# =============================================================================
#  LEXER IMPLEMENTATION: ONE MASTER REGEX
# =============================================================================
#
# The whole lexical grammar is a single compiled regex with one named group
# per token kind. finditer walks the source left to right; a gap between the
# end of one match and the start of the next is a character no rule accepts,
# and is reported as InvalidToken.
#
# Whitespace and ';' comments are matched like any other lexeme and then
# dropped, so they never reach the parser. Line and column are advanced over
# every matched lexeme, including the dropped ones, so locations stay exact
# across comments and multi-line strings.
#
# The token stream always ends with exactly one EOF token sitting at the
# position just past the last consumed character.
# =============================================================================

import logging
import re
from typing import Iterator, List, NamedTuple, Tuple

from sexpr_errors import InvalidToken, Location, UnterminatedString

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# TOKEN KINDS
# ---------------------------------------------------------------------------
LPAREN   = "LPAREN"
RPAREN   = "RPAREN"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"
LBRACE   = "LBRACE"
RBRACE   = "RBRACE"
QUOTE    = "QUOTE"
SYMBOL   = "SYMBOL"
STRING   = "STRING"
NUMBER   = "NUMBER"
EOF      = "EOF"

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
# Symbol characters: ASCII letters, digits and a fixed punctuation set.
# NUMBER is tried before SYMBOL, so a leading digit always starts a number.
_WHITESPACE    = r"[ \t\n\r\f]+"
_COMMENT       = r";[^\n]*\n?"
_STRING        = r'"[^"]*"'
_OPEN_STRING   = r'"[^"]*\Z'
_NUMBER        = r"[0-9]+(?:\.[0-9]*)?"
_SYMBOL        = r"[A-Za-z0-9_?!=<>\-+*/%&|~#]+"

_TOKEN_RE = re.compile(
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<OPEN_STRING>{_OPEN_STRING})|"
    rf"(?P<NUMBER>{_NUMBER})|"
    rf"(?P<SYMBOL>{_SYMBOL})|"
    r"(?P<LPAREN>\()|"
    r"(?P<RPAREN>\))|"
    r"(?P<LBRACKET>\[)|"
    r"(?P<RBRACKET>\])|"
    r"(?P<LBRACE>\{)|"
    r"(?P<RBRACE>\})|"
    r"(?P<QUOTE>')|"
    rf"(?P<COMMENT>{_COMMENT})|"
    rf"(?P<WHITESPACE>{_WHITESPACE})",
)

_SKIPPED = frozenset(["WHITESPACE", "COMMENT"])


# ---------------------------------------------------------------------------
# TOKEN RECORD
# ---------------------------------------------------------------------------
class Token(NamedTuple):
    """
    Immutable token record: (kind, start, end, location).

    start and end are a half-open character span into the source. The token
    holds no text of its own; text() slices it out of the source on demand.
    """
    kind: str
    start: int
    end: int
    location: Location

    def text(self, source: str) -> str:
        return source[self.start:self.end]


# ---------------------------------------------------------------------------
# LINE / COLUMN BOOKKEEPING
# ---------------------------------------------------------------------------
def _advance(line: int, column: int, lexeme: str) -> Tuple[int, int]:
    """
    Move a (line, column) cursor across lexeme. Each newline bumps the line
    and resets the column to 1; every other character adds one column.
    """
    newlines = lexeme.count("\n")
    if newlines == 0:
        return line, column + len(lexeme)
    return line + newlines, len(lexeme) - lexeme.rfind("\n")


# ---------------------------------------------------------------------------
# SCANNER
# ---------------------------------------------------------------------------
def iter_tokens(source: str) -> Iterator[Token]:
    """
    Single-pass generator over the tokens of source, ending with EOF.

    Raises UnterminatedString or InvalidToken at the first lexical fault.
    """
    pos = 0
    line, column = 1, 1
    for m in _TOKEN_RE.finditer(source):
        start = m.start()
        if start != pos:
            # Gap in match coverage
            raise InvalidToken(Location(line, column, line, column + 1), source, source[pos])

        kind = m.lastgroup
        lexeme = m.group()
        end_line, end_column = _advance(line, column, lexeme)
        pos = m.end()

        if kind == "OPEN_STRING":
            raise UnterminatedString(Location(line, column, end_line, end_column), source)
        if kind not in _SKIPPED:
            yield Token(kind, start, pos, Location(line, column, end_line, end_column))

        line, column = end_line, end_column

    if pos != len(source):
        raise InvalidToken(Location(line, column, line, column + 1), source, source[pos])

    yield Token(EOF, pos, pos, Location.point(line, column))


def lex(source: str) -> List[Token]:
    """
    Tokenize source eagerly. All or nothing: either the full token list,
    terminated by one EOF token, or the first lexical error.
    """
    tokens = list(iter_tokens(source))
    logger.debug("lexed %d tokens from %d characters", len(tokens), len(source))
    return tokens
