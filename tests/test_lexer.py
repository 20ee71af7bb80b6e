import pytest

import expr_compiler as ec


def toks(src):
    """Return list of (type, value) pairs."""
    return [(t.type, t.value) for t in ec.tokenize(src)]


# ---------- Basic tokens ----------

def test_integer_literal():
    assert toks("42") == [("NUMBER", "42")]


def test_decimal_literal():
    assert toks("3.14") == [("NUMBER", "3.14")]


def test_leading_dot_decimal():
    assert toks(".5") == [("NUMBER", ".5")]


def test_identifier_with_digits():
    assert toks("x1y2") == [("IDENT", "x1y2")]


def test_operators_and_parens():
    assert toks("+-*/()") == [
        ("OPERATOR", "+"), ("OPERATOR", "-"), ("OPERATOR", "*"),
        ("OPERATOR", "/"), ("OPERATOR", "("), ("OPERATOR", ")"),
    ]


def test_whitespace_skipped():
    assert toks("  a \t+\n 2 ") == [("IDENT", "a"), ("OPERATOR", "+"), ("NUMBER", "2")]


def test_number_then_identifier_split():
    # identifiers cannot start with a digit
    assert toks("2x") == [("NUMBER", "2"), ("IDENT", "x")]


def test_tokens_cover_all_non_whitespace():
    src = " (alpha + 12.5) * -beta / 7 "
    assert "".join(t.value for t in ec.tokenize(src)) == "".join(src.split())


def test_empty_input():
    assert toks("") == []
    assert toks("   ") == []


# ---------- Errors ----------

def test_multiple_dots():
    with pytest.raises(ec.LexicalError, match="multiple dots"):
        ec.tokenize("3.1.4")


def test_invalid_character_reports_position():
    with pytest.raises(ec.LexicalError) as exc:
        ec.tokenize("2 $ 3")
    assert "'$'" in str(exc.value)
    assert "position 3" in str(exc.value)


def test_underscore_is_invalid():
    with pytest.raises(ec.LexicalError, match="position 2"):
        ec.tokenize("a_b")


def test_lone_dot_is_invalid():
    with pytest.raises(ec.LexicalError, match="Invalid character"):
        ec.tokenize("1 + .")


def test_lexical_error_phase():
    with pytest.raises(ec.CompileError) as exc:
        ec.tokenize("#")
    assert exc.value.phase == "Lexical"


def test_format_tokens_pads_type():
    assert ec.format_tokens(ec.tokenize("x+1")) == (
        "IDENT    x\n"
        "OPERATOR +\n"
        "NUMBER   1"
    )
