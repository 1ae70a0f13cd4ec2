"""Tests for the Lua table writer."""

import math

import pytest

from jkrsave.codec.lua_table import IndexKey, StringKey, parse
from jkrsave.codec.lua_writer import dump, format_number, quote
from jkrsave.util.errors import EncodeError


class TestDump:
    def test_game_layout(self):
        tree = {StringKey("a"): 1, StringKey("b"): {IndexKey(1): "x", IndexKey(2): "y"}}
        assert dump(tree) == 'return {["a"]=1,["b"]={[1]="x",[2]="y",},}'

    def test_empty_table(self):
        assert dump({}) == "return {}"

    def test_scalars(self):
        tree = {StringKey("t"): True, StringKey("f"): False, StringKey("n"): None}
        assert dump(tree) == 'return {["t"]=true,["f"]=false,["n"]=nil,}'

    def test_string_keys_are_quoted(self):
        assert dump({StringKey('a"b'): 1}) == 'return {["a\\"b"]=1,}'

    def test_parse_reads_back_dump(self):
        tree = {
            StringKey("name"): 'Jimbo "the" \\ jester\n',
            IndexKey(3): {IndexKey(1): 0.25, IndexKey(2): -7},
        }
        assert parse(dump(tree)) == tree

    def test_unsupported_value_raises(self):
        with pytest.raises(EncodeError):
            dump({StringKey("a"): object()})


class TestQuote:
    @pytest.mark.parametrize("text, expected", [
        ("plain", '"plain"'),
        ('say "hi"', '"say \\"hi\\""'),
        ("a\\b", '"a\\\\b"'),
        ("line\nbreak", '"line\\\nbreak"'),
        ("cr\r", '"cr\\r"'),
        ("nul\0", '"nul\\000"'),
        ("tab\t", '"tab\t"'),
        ("♠", '"♠"'),
    ])
    def test_quote(self, text, expected):
        assert quote(text) == expected

    def test_nul_before_digit_reads_back(self):
        literal = quote("\x005")
        assert parse("return {[1]=" + literal + ",}") == {IndexKey(1): "\x005"}


class TestFormatNumber:
    @pytest.mark.parametrize("value, expected", [
        (0, "0"),
        (-12, "-12"),
        (2 ** 40, "1099511627776"),
        (0.5, "0.5"),
        (1.0, "1.0"),
        (1e20, "1e+20"),
        (1e-7, "1e-07"),
        (math.inf, "inf"),
        (-math.inf, "-inf"),
        (math.nan, "nan"),
    ])
    def test_format(self, value, expected):
        assert format_number(value) == expected
