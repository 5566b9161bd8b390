import pytest

from eolina.eolina_datatypes import (
    Check, Concat, Copy, Filter, In, Index, IsConso, IsLower, IsUpper, IsVowel,
    Join, Map, MapKind, Out, Rotate, Slice, Split,
)
from eolina.eolina_errors import EmptyProgram, ParseError, UnknownToken
from eolina.eolina_range import End, EolinaRange, Start
from eolina.eolina_tokenizer import (
    build_token, next_token, scan_token, skip_whitespace, token_parser,
)

# Test cases: (id, program, expected_token, expected_length)
TOKEN_CASES = [
    ("in", "<", In(), 1),
    ("out", ">", Out(), 1),
    ("join", ".", Join(), 1),
    ("concat", "~", Concat(), 1),
    ("copy", "*", Copy(), 1),
    ("is_vowel", "v", IsVowel(), 1),
    ("is_conso", "c", IsConso(), 1),
    ("is_lower", "_", IsLower(), 1),
    ("is_upper", "^", IsUpper(), 1),
    ("split_chars", "//", Split(None), 2),
    ("split_literal", '/"ab"/', Split("ab"), 6),
    ("split_empty_literal", '/""/', Split(""), 4),
    ("rotate_bare", "@", Rotate(1), 1),
    ("rotate_zero", "@0", Rotate(1), 2),
    ("rotate_three", "@3", Rotate(3), 2),
    ("rotate_multi_digit", "@12", Rotate(12), 3),
    ("map_lower", "{_}", Map(MapKind.LOWER), 3),
    ("map_upper", "{^}", Map(MapKind.UPPER), 3),
    ("map_swap", "{%}", Map(MapKind.SWAP), 3),
    ("filter_vowel", "[v]", Filter(Check.VOWEL), 3),
    ("filter_conso", "[c]", Filter(Check.CONSO), 3),
    ("filter_lower", "[_]", Filter(Check.LOWER), 3),
    ("filter_upper", "[^]", Filter(Check.UPPER), 3),
    ("slice_full", "|.|", Slice(EolinaRange()), 3),
    ("slice_start", "|3.|", Slice(EolinaRange(Start(3), None)), 4),
    ("slice_end_from_back", "|.-3|", Slice(EolinaRange(None, End(3))), 5),
    ("slice_both", "|1.-2|", Slice(EolinaRange(Start(1), End(2))), 6),
    ("slice_minus_zero", "|-0.|", Slice(EolinaRange(End(0), None)), 5),
    ("index_front", "|2|", Index(Start(2)), 3),
    ("index_back", "|-1|", Index(End(1)), 4),
]


@pytest.mark.parametrize("program, expected, length", [c[1:] for c in TOKEN_CASES], ids=[c[0] for c in TOKEN_CASES])
def test_scan_single_token(program, expected, length):
    token, consumed = scan_token(program)
    assert token == expected
    assert consumed == length


@pytest.mark.parametrize("program", [c[1] for c in TOKEN_CASES], ids=[c[0] for c in TOKEN_CASES])
def test_token_display_round_trips(program):
    token, _ = scan_token(program)
    reparsed, _ = scan_token(str(token))
    assert reparsed == token


def test_next_token_consumes_in_then_out():
    remainder, token, consumed = next_token("<>")
    assert (remainder, token, consumed) == (">", In(), 1)

    remainder, token, consumed = next_token(remainder)
    assert (remainder, token, consumed) == ("", Out(), 1)


def test_leading_whitespace_is_part_of_the_length():
    token, consumed = scan_token("  \t<")
    assert token == In()
    assert consumed == 4


def test_scan_from_offset():
    program = "< |1.2| >"
    token, consumed = scan_token(program, 1)
    assert token == Slice(EolinaRange(Start(1), Start(2)))
    assert consumed == 6
    assert program[1 + consumed:] == " >"


def test_minus_zero_is_kept_distinct():
    token, _ = scan_token("|-0|")
    assert token == Index(End(0))
    assert token != Index(Start(0))


@pytest.mark.parametrize("program", ["", "   ", "\n\t\r"])
def test_empty_program(program):
    with pytest.raises(EmptyProgram):
        scan_token(program)


@pytest.mark.parametrize("program", ["x", "?<>", "/ab/", "|x|", "{v}", "[%]", "-1", '/"a/'])
def test_unknown_token(program):
    with pytest.raises(UnknownToken) as excinfo:
        scan_token(program)
    assert isinstance(excinfo.value, ParseError)


def test_unknown_token_carries_the_remaining_text():
    with pytest.raises(UnknownToken) as excinfo:
        scan_token("<  ? >", 1)
    assert excinfo.value.text == "? >"
    assert str(excinfo.value) == "unknown token at `? >`"


def test_vertical_tab_is_not_whitespace():
    with pytest.raises(UnknownToken):
        scan_token("\x0b<")


def test_rotate_count_is_not_bounded_by_a_machine_word():
    token, consumed = scan_token("@99999999999999999999")
    assert token == Rotate(99999999999999999999)
    assert consumed == 21


@pytest.mark.parametrize("program", [
    "@" + "1" * 5000,
    "|" + "1" * 5000 + ".|",
    "|-" + "1" * 5000 + "|",
], ids=["rotate", "slice", "index"])
def test_numbers_too_long_to_convert_are_unknown_tokens(program):
    with pytest.raises(UnknownToken) as excinfo:
        next_token(program)
    assert excinfo.value.text == program


def test_token_parser_is_loaded_once():
    assert token_parser() is token_parser()


def test_grammar_node_for_a_token():
    parse_out = token_parser().parse(" |1.-2| >")
    assert parse_out["status"] == "success"
    parts = parse_out["ast"]["children"]
    assert parts["whitespace"]["text"] == " "
    assert parts["token"]["tag"] == "slice"
    assert parts["token"]["text"] == "|1.-2|"
    assert parts["rest"]["text"] == " >"
    assert build_token(parts["token"]) == Slice(EolinaRange(Start(1), End(2)))


def test_skip_whitespace():
    assert skip_whitespace("  <", 0) == 2
    assert skip_whitespace("<  ", 1) == 3
    assert skip_whitespace("<", 0) == 0
