# sexpr_model.py
# The Model: cons-cell values produced by the S-expression reader.
#
# =============================================================================
#  REPRESENTATION
# =============================================================================
#
# Atoms are Int, Float, String, Bool, Null and Symbol. Pair is the only
# compound node. A list is a right-nested chain of Pairs ending in Null; there
# is no separate list type, and the empty list is Null itself.
#
# All variants are frozen dataclasses, so equality is structural and values
# can be shared freely between callers without copying.
# =============================================================================

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Union

TRUE_LITERAL  = "#t"
FALSE_LITERAL = "#f"
NULL_LITERAL  = "null"
QUOTE_SYMBOL  = "quote"


# ---------------------------------------------------------------------------
# ATOMS
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Int:
    value: int

    def __str__(self) -> str:
        return to_string(self)


@dataclass(frozen=True)
class Float:
    value: float

    def __str__(self) -> str:
        return to_string(self)


@dataclass(frozen=True)
class String:
    value: str

    def __str__(self) -> str:
        return to_string(self)


@dataclass(frozen=True)
class Bool:
    value: bool

    def __str__(self) -> str:
        return to_string(self)


@dataclass(frozen=True)
class Null:
    """The empty list, also the terminator of every proper list."""

    def __str__(self) -> str:
        return to_string(self)


@dataclass(frozen=True)
class Symbol:
    value: str

    def __str__(self) -> str:
        return to_string(self)


NULL = Null()


# ---------------------------------------------------------------------------
# CONS CELL
# ---------------------------------------------------------------------------
# Equality, hashing and repr walk the cdr spine in a loop; only car nesting
# recurses.
@dataclass(frozen=True, eq=False, repr=False)
class Pair:
    car: "Model"
    cdr: "Model"

    def __iter__(self) -> Iterator["Model"]:
        """Yield the elements along the cdr spine, stopping at the first non-Pair."""
        node: Model = self
        while isinstance(node, Pair):
            yield node.car
            node = node.cdr

    def tail(self) -> "Model":
        """Return whatever ends the cdr spine: Null for a proper list."""
        node: Model = self
        while isinstance(node, Pair):
            node = node.cdr
        return node

    def __eq__(self, other) -> bool:
        if not isinstance(other, Pair):
            return NotImplemented
        left: Model = self
        right: Model = other
        while isinstance(left, Pair) and isinstance(right, Pair):
            if left is right:
                return True
            if left.car != right.car:
                return False
            left, right = left.cdr, right.cdr
        return left == right

    def __hash__(self) -> int:
        h = hash(Pair)
        for item in self:
            h = hash((h, item))
        return hash((h, self.tail()))

    def __repr__(self) -> str:
        heads = [f"Pair(car={item!r}, cdr=" for item in self]
        return "".join(heads) + repr(self.tail()) + ")" * len(heads)

    def __str__(self) -> str:
        return to_string(self)


Model = Union[Int, Float, String, Bool, Null, Symbol, Pair]


# ---------------------------------------------------------------------------
# LIST HELPERS
# ---------------------------------------------------------------------------
def from_list(items: Iterable[Model], tail: Model = NULL) -> Model:
    """
    Fold items right-to-left into a Pair chain ending in tail.

    The last item is paired with tail first, then each earlier item is paired
    with that result, so iteration order becomes car order.
    """
    result = tail
    for item in reversed(list(items)):
        result = Pair(item, result)
    return result


def to_list(model: Model) -> List[Model]:
    """Unfold a proper list into a Python list. Raises ValueError otherwise."""
    if isinstance(model, Null):
        return []
    if not isinstance(model, Pair):
        raise ValueError(f"not a list: {model}")
    if not isinstance(model.tail(), Null):
        raise ValueError(f"improper list: {model}")
    return list(model)


def quoted(model: Model) -> Pair:
    """Build (quote model)."""
    return Pair(Symbol(QUOTE_SYMBOL), Pair(model, NULL))


# ---------------------------------------------------------------------------
# PRINTER
# ---------------------------------------------------------------------------
def to_string(model: Model) -> str:
    """
    Render a Model in surface syntax. Every __str__ in this module lands here.

    Proper lists print as (a b c), improper tails as (a . b). Quote forms are
    not re-sugared, and strings are printed verbatim between quotes.
    """
    if isinstance(model, Pair):
        inner = " ".join(to_string(item) for item in model)
        end = model.tail()
        if isinstance(end, Null):
            return "(" + inner + ")"
        return "(" + inner + " . " + to_string(end) + ")"
    if isinstance(model, Null):
        return "()"
    if isinstance(model, Bool):
        return TRUE_LITERAL if model.value else FALSE_LITERAL
    if isinstance(model, String):
        return '"' + model.value + '"'
    if isinstance(model, Float):
        return repr(model.value)
    return str(model.value)
