import pytest

from icsdata.symbols import (
    CATEGORIES,
    SUB_CATEGORIES,
    SUB_SUB_CATEGORIES,
    VALUES,
    SymbolTable,
    Token,
)


def test_lookup_known_names():
    assert CATEGORIES.lookup("layout") is Token.LAYOUT
    assert CATEGORIES.lookup("history") is Token.HISTORY
    assert SUB_CATEGORIES.lookup("sizes") is Token.SIZES
    assert SUB_CATEGORIES.lookup("SCIL_TYPE") is Token.SCILT
    assert SUB_SUB_CATEGORIES.lookup("PinholeRadius") is Token.PINHRAD
    assert VALUES.lookup("gzip") is Token.COMPR_GZIP


def test_float_is_an_alias_for_real():
    assert VALUES.lookup("float") is Token.FORMAT_REAL
    assert VALUES.lookup("real") is Token.FORMAT_REAL
    assert VALUES.name_of(Token.FORMAT_REAL) == "real"


def test_values_table_holds_one_extra_name():
    names = [name for name, _ in VALUES]
    tokens = {VALUES.lookup(name) for name in names}
    assert None not in tokens
    assert len(VALUES) == len(names)
    assert len(VALUES) == len(tokens) + 1


def test_lookup_is_case_sensitive():
    assert SUB_CATEGORIES.lookup("Sizes") is None
    assert SUB_SUB_CATEGORIES.lookup("channels") is None
    assert "Channels" in SUB_SUB_CATEGORIES


def test_unknown_name_gives_none():
    assert CATEGORIES.lookup("nonsense") is None
    assert "nonsense" not in VALUES


def test_name_token_round_trip():
    for name, token in CATEGORIES:
        assert CATEGORIES.lookup(CATEGORIES.name_of(token)) is token
        assert CATEGORIES.lookup(name) is token
    for name, token in SUB_CATEGORIES:
        assert SUB_CATEGORIES.lookup(SUB_CATEGORIES.name_of(token)) is token
        assert SUB_CATEGORIES.lookup(name) is token
    for name, token in SUB_SUB_CATEGORIES:
        assert SUB_SUB_CATEGORIES.lookup(SUB_SUB_CATEGORIES.name_of(token)) is token
        assert SUB_SUB_CATEGORIES.lookup(name) is token
    for name, token in VALUES:
        assert VALUES.lookup(VALUES.name_of(token)) is token
        assert VALUES.lookup(name) is token


def test_name_of_unknown_token_raises():
    with pytest.raises(KeyError):
        CATEGORIES.name_of(Token.SIZES)


def test_tables_do_not_share_tokens():
    found = [
        {CATEGORIES.lookup(name) for name, _ in CATEGORIES},
        {SUB_CATEGORIES.lookup(name) for name, _ in SUB_CATEGORIES},
        {SUB_SUB_CATEGORIES.lookup(name) for name, _ in SUB_SUB_CATEGORIES},
        {VALUES.lookup(name) for name, _ in VALUES},
    ]
    seen = set()
    for tokens in found:
        assert None not in tokens
        assert not tokens & seen
        seen |= tokens
    assert seen == set(Token)


def test_custom_table_keeps_first_name():
    table = SymbolTable([("a", Token.END), ("b", Token.END)])
    assert len(table) == 2
    assert table.name_of(Token.END) == "a"
    assert list(table) == [("a", Token.END), ("b", Token.END)]