# sexpr_parser.py
# Recursive-descent reader that turns S-expression source into cons-cell Models.
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT OVER A TOKEN LIST
# =============================================================================
#
# parse(source) runs two stages back to back:
#
#   lex(source)  -> list of tokens ending in one EOF token
#   Parser.parse -> list of top-level Model values
#
# The grammar is LL(1): the kind of the lookahead token alone picks the rule.
#
#   number  -> Int, or Float when the text contains '.'
#   string  -> String, delimiting quotes stripped
#   symbol  -> Bool for #t / #f, Null for null, Symbol otherwise
#   '(' ... ')'  -> right-nested Pairs ending in Null; '()' is Null itself
#   "'" expr     -> (quote expr)
#
# Open '(' tokens are kept on a stack. A list that runs into end of input is
# left on the stack rather than failing on the spot; once all input has been
# consumed, the earliest opener still on the stack is reported as
# UnmatchedParen, so the diagnostic points at the outermost unbalanced form.
#
# Both stages are fail-fast. The first error is raised and no partial result
# is returned.
#
# Depth guard: every '(' and quote mark costs a level of Python recursion.
# The default limit is derived from sys.getrecursionlimit() when the parse
# starts. Nesting past max_depth, or a RecursionError hit before it, is raised
# as DepthLimitExceeded at the innermost opener.
# =============================================================================

import logging
import math
import sys
from typing import List, Optional

from sexpr_errors import (
    DepthLimitExceeded,
    InvalidNumber,
    InvalidToken,
    Location,
    ParseError,
    UnexpectedEof,
    UnexpectedToken,
    UnmatchedParen,
    UnterminatedString,
)
from sexpr_lexer import EOF, LPAREN, NUMBER, QUOTE, RPAREN, STRING, SYMBOL, Token, lex
from sexpr_model import (
    FALSE_LITERAL,
    NULL,
    NULL_LITERAL,
    TRUE_LITERAL,
    Bool,
    Float,
    Int,
    Model,
    Null,
    Pair,
    String,
    Symbol,
    from_list,
    quoted,
    to_list,
    to_string,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
FRAME_HEADROOM      = 100        # Stack frames left for the caller below parse()
FRAMES_PER_LEVEL    = 2          # parse_expression + _parse_list
INT_MIN             = -(2 ** 63)
INT_MAX             = 2 ** 63 - 1
EXPRESSION          = "expression"

_KEYWORDS = {
    TRUE_LITERAL:  Bool(True),
    FALSE_LITERAL: Bool(False),
    NULL_LITERAL:  NULL,
}


def default_depth_limit() -> int:
    """Deepest nesting the current interpreter recursion limit leaves room for."""
    return max(1, (sys.getrecursionlimit() - FRAME_HEADROOM) // FRAMES_PER_LEVEL)


# ---------------------------------------------------------------------------
# PARSER
# ---------------------------------------------------------------------------
class Parser:
    """
    Owns one token list and the open-delimiter stack for a single parse.

    The token list must end with an EOF token (lex() guarantees this); the
    cursor never moves past it.
    """

    def __init__(self, tokens: List[Token], source: str, *, max_depth: Optional[int] = None):
        if not tokens or tokens[-1].kind != EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.source = source
        self.max_depth = default_depth_limit() if max_depth is None else max_depth
        self._pos = 0
        self._open: List[Token] = []
        self._innermost: Optional[Token] = None
        self._depth = 0

    # -- cursor --------------------------------------------------------------
    def peek(self) -> Token:
        return self.tokens[self._pos]

    def advance(self) -> Token:
        tok = self.tokens[self._pos]
        if tok.kind != EOF:
            self._pos += 1
        return tok

    def expect(self, kind: str) -> Token:
        """
        Consume and return the lookahead if it is of the given kind.

        This is the one place a token-kind mismatch turns into an error.
        """
        tok = self.peek()
        if tok.kind == kind:
            return self.advance()
        if tok.kind == EOF:
            raise UnexpectedEof(kind, tok.location, self.source)
        raise UnexpectedToken(kind, tok.kind, tok.location, self.source)

    # -- grammar -------------------------------------------------------------
    def parse(self) -> List[Model]:
        """Parse every top-level form up to EOF."""
        forms: List[Model] = []
        try:
            while self.peek().kind != EOF:
                forms.append(self.parse_expression())
        except RecursionError:
            opener = self._innermost if self._innermost is not None else self.peek()
            raise DepthLimitExceeded(max(self._depth - 1, 0), opener.location, self.source) from None

        if self._open:
            raise UnmatchedParen(self._open[0].location, self.source)
        return forms

    def parse_expression(self, depth: int = 0) -> Model:
        tok = self.peek()
        kind = tok.kind

        if kind == NUMBER:
            return self._parse_number(self.advance())
        if kind == STRING:
            return self._parse_string(self.advance())
        if kind == SYMBOL:
            return self._parse_symbol(self.advance())
        if kind == LPAREN:
            self._check_depth(depth + 1, tok)
            return self._parse_list(depth + 1)
        if kind == QUOTE:
            self._check_depth(depth + 1, tok)
            self.advance()
            return quoted(self.parse_expression(depth + 1))
        if kind == EOF:
            raise UnexpectedEof(EXPRESSION, tok.location, self.source)

        raise UnexpectedToken(EXPRESSION, kind, tok.location, self.source)

    def _check_depth(self, depth: int, opener: Token):
        self._innermost = opener
        self._depth = depth
        if depth > self.max_depth:
            raise DepthLimitExceeded(self.max_depth, opener.location, self.source)

    def _parse_list(self, depth: int) -> Model:
        opener = self.advance()
        self._open.append(opener)

        items: List[Model] = []
        while self.peek().kind not in (RPAREN, EOF):
            items.append(self.parse_expression(depth))

        if self.peek().kind == EOF:
            # Opener stays on the stack; parse() reports it after the last form
            return from_list(items)

        self.expect(RPAREN)
        self._open.pop()
        return from_list(items)

    def _parse_number(self, tok: Token) -> Model:
        text = tok.text(self.source)
        if "." in text:
            value = float(text)
            if math.isinf(value):
                raise InvalidNumber(text, tok.location, self.source)
            return Float(value)

        try:
            value = int(text)
        except ValueError:
            # Digit strings past the interpreter's int conversion limit
            raise InvalidNumber(text, tok.location, self.source) from None
        if not INT_MIN <= value <= INT_MAX:
            raise InvalidNumber(text, tok.location, self.source)
        return Int(value)

    def _parse_string(self, tok: Token) -> Model:
        text = tok.text(self.source)
        if len(text) < 2:
            raise UnterminatedString(tok.location, self.source)
        return String(text[1:-1])

    def _parse_symbol(self, tok: Token) -> Model:
        text = tok.text(self.source)
        keyword = _KEYWORDS.get(text)
        if keyword is not None:
            return keyword
        return Symbol(text)


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(source: str, *, max_depth: Optional[int] = None) -> List[Model]:
    """
    Read every top-level form in source.

    Returns the forms in source order, or raises the first ParseError hit by
    the lexer or the parser. max_depth bounds list and quote nesting; None
    takes default_depth_limit() at call time.
    """
    tokens = lex(source)
    forms = Parser(tokens, source, max_depth=max_depth).parse()
    logger.debug("parsed %d top-level forms from %d tokens", len(forms), len(tokens))
    return forms


__all__ = [
    "Bool",
    "DepthLimitExceeded",
    "Float",
    "Int",
    "InvalidNumber",
    "InvalidToken",
    "Location",
    "Model",
    "NULL",
    "Null",
    "Pair",
    "ParseError",
    "Parser",
    "String",
    "Symbol",
    "UnexpectedEof",
    "UnexpectedToken",
    "UnmatchedParen",
    "UnterminatedString",
    "default_depth_limit",
    "from_list",
    "lex",
    "parse",
    "to_list",
    "to_string",
]
