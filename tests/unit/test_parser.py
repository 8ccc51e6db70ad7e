import sys

import pytest

import sexpr_parser as sp
from sexpr_parser import NULL, Bool, Float, Int, Location, Pair, String, Symbol


def test_integer_literal():
    assert sp.parse("123") == [Int(123)]


def test_float_literal():
    assert sp.parse("1.5") == [Float(1.5)]
    assert sp.parse("2.") == [Float(2.0)]


def test_int_and_float_are_distinct_variants():
    assert sp.parse("1") != sp.parse("1.0")


def test_string_literal_strips_quotes():
    assert sp.parse('"Hello, World!"') == [String("Hello, World!")]
    assert sp.parse('""') == [String("")]


def test_string_content_is_verbatim():
    assert sp.parse(r'"a\nb"') == [String(r"a\nb")]
    assert sp.parse('"line1\nline2"') == [String("line1\nline2")]


def test_keyword_symbols():
    assert sp.parse("#t") == [Bool(True)]
    assert sp.parse("#f") == [Bool(False)]
    assert sp.parse("null") == [NULL]


def test_keyword_lookup_is_exact_and_case_sensitive():
    assert sp.parse("#T NULL nullx #true") == [
        Symbol("#T"), Symbol("NULL"), Symbol("nullx"), Symbol("#true"),
    ]


def test_list_is_right_nested_pairs():
    assert sp.parse("(1 2 3)") == [Pair(Int(1), Pair(Int(2), Pair(Int(3), NULL)))]


def test_empty_list_is_null():
    assert sp.parse("()") == [NULL]
    assert sp.parse("( \n )") == [NULL]


def test_nested_lists():
    assert sp.parse("(a (b) ())") == [
        Pair(Symbol("a"), Pair(Pair(Symbol("b"), NULL), Pair(NULL, NULL))),
    ]


def test_quote_desugars_to_two_element_list():
    assert sp.parse("'x") == [Pair(Symbol("quote"), Pair(Symbol("x"), NULL))]


def test_quoted_list_and_nested_quote():
    assert sp.parse("'(1)") == [
        Pair(Symbol("quote"), Pair(Pair(Int(1), NULL), NULL)),
    ]
    inner = Pair(Symbol("quote"), Pair(Symbol("a"), NULL))
    assert sp.parse("''a") == [Pair(Symbol("quote"), Pair(inner, NULL))]


def test_quote_inside_list():
    assert sp.parse("(f 'x)") == [
        Pair(Symbol("f"), Pair(Pair(Symbol("quote"), Pair(Symbol("x"), NULL)), NULL)),
    ]


def test_multiple_top_level_forms_in_order():
    assert sp.parse("1 foo \"s\" ()") == [Int(1), Symbol("foo"), String("s"), NULL]


def test_empty_and_blank_sources_have_no_forms():
    assert sp.parse("") == []
    assert sp.parse("  \n; only a comment") == []


def test_comments_are_transparent():
    assert sp.parse("; comment\n42") == sp.parse("42") == [Int(42)]
    assert sp.parse("(1 ; one\n 2)") == sp.parse("(1 2)")


def test_reparse_is_structurally_equal():
    src = "(define (sq x) (* x x)) ; square\n'(1 2.5 \"s\" #t)"
    assert sp.parse(src) == sp.parse(src)


def test_max_int_boundary():
    assert sp.parse("9223372036854775807") == [Int(2 ** 63 - 1)]


def test_unmatched_paren_points_at_opener():
    with pytest.raises(sp.UnmatchedParen) as ei:
        sp.parse("(1 2")
    assert ei.value.location == Location(1, 1, 1, 2)


def test_unmatched_paren_reports_earliest_opener():
    with pytest.raises(sp.UnmatchedParen) as ei:
        sp.parse("(a)\n  (b (c")
    loc = ei.value.location
    assert (loc.start_line, loc.start_column) == (2, 3)


def test_unmatched_paren_in_quote():
    with pytest.raises(sp.UnmatchedParen):
        sp.parse("'(a b")


def test_unterminated_string():
    with pytest.raises(sp.UnterminatedString):
        sp.parse('"abc')


def test_stray_close_paren():
    with pytest.raises(sp.UnexpectedToken) as ei:
        sp.parse("1 )")
    err = ei.value
    assert err.expected == "expression"
    assert err.found == "RPAREN"
    assert err.location == Location(1, 3, 1, 4)


@pytest.mark.parametrize("src, found", [
    ("[1]", "LBRACKET"),
    ("{a}", "LBRACE"),
    ("(a ])", "RBRACKET"),
])
def test_brackets_and_braces_are_not_expressions(src, found):
    with pytest.raises(sp.UnexpectedToken) as ei:
        sp.parse(src)
    assert ei.value.found == found


def test_quote_at_end_of_input():
    with pytest.raises(sp.UnexpectedEof) as ei:
        sp.parse("(a) '")
    err = ei.value
    assert err.expected == "expression"
    assert err.location == Location.point(1, 6)


def test_integer_overflow_is_invalid_number():
    with pytest.raises(sp.InvalidNumber) as ei:
        sp.parse("(x 9223372036854775808)")
    err = ei.value
    assert err.raw == "9223372036854775808"
    assert err.location == Location(1, 4, 1, 23)


def test_float_overflow_is_invalid_number():
    with pytest.raises(sp.InvalidNumber):
        sp.parse("9" * 400 + ".0")


def test_lexical_errors_surface_through_parse():
    with pytest.raises(sp.InvalidToken):
        sp.parse("(a . b)")


def test_depth_limit():
    src = "(" * 20 + ")" * 20
    assert sp.parse(src, max_depth=20)
    with pytest.raises(sp.DepthLimitExceeded) as ei:
        sp.parse(src, max_depth=19)
    err = ei.value
    assert err.limit == 19
    assert err.location == Location(1, 20, 1, 21)


def test_depth_limit_counts_quotes():
    with pytest.raises(sp.DepthLimitExceeded):
        sp.parse("'''x", max_depth=2)


def test_default_depth_limit_gives_parse_error_not_recursion_error():
    with pytest.raises(sp.ParseError):
        sp.parse("(" * 5000)


def test_default_limit_accepts_three_hundred_levels():
    forms = sp.parse("(" * 300 + ")" * 300)
    assert len(forms) == 1
    assert isinstance(forms[0], Pair)


def test_default_limit_follows_recursion_limit(monkeypatch):
    monkeypatch.setattr(sys, "getrecursionlimit", lambda: 300)
    assert sp.default_depth_limit() == 100
    assert sp.parse("(" * 100 + ")" * 100)
    with pytest.raises(sp.DepthLimitExceeded) as ei:
        sp.parse("(" * 101 + ")" * 101)
    assert ei.value.limit == 100
    assert ei.value.location == Location(1, 101, 1, 102)


def test_very_deep_input_is_a_parse_error_with_default_limit():
    src = "(" * 3000 + ")" * 3000
    with pytest.raises(sp.ParseError):
        sp.parse(src, max_depth=None)


def test_recursion_error_past_explicit_limit_becomes_depth_error():
    src = "(" * 3000 + ")" * 3000
    with pytest.raises(sp.DepthLimitExceeded) as ei:
        sp.parse(src, max_depth=100000)
    err = ei.value
    assert err.limit < 3000
    # located at the innermost opener reached before the stack ran out
    assert err.location.start_line == 1
    assert err.location.start_column == err.limit + 1


def test_every_error_is_a_syntax_error():
    with pytest.raises(SyntaxError):
        sp.parse("(")


def test_parser_requires_eof_terminated_tokens():
    with pytest.raises(ValueError):
        sp.Parser([], "")


def test_expect_mismatch_and_eof():
    src = "a"
    parser = sp.Parser(sp.lex(src), src)
    with pytest.raises(sp.UnexpectedToken) as ei:
        parser.expect("RPAREN")
    assert ei.value.expected == "RPAREN"
    assert ei.value.found == "SYMBOL"
    assert parser.expect("SYMBOL").text(src) == "a"
    with pytest.raises(sp.UnexpectedEof) as ei:
        parser.expect("RPAREN")
    assert ei.value.expected == "RPAREN"


def test_cursor_never_moves_past_eof():
    parser = sp.Parser(sp.lex(""), "")
    assert parser.advance().kind == "EOF"
    assert parser.advance().kind == "EOF"
    assert parser.peek().kind == "EOF"
