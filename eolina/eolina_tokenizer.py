"""
The Eolina tokenizer.

`scan_token` reads one token at an offset into the program text, so the
generators can walk a single program string by index instead of slicing
copies of it. `next_token` is the remainder-returning form of the same scan.

The token grammar lives in `eolina_grammar.yaml` and is parsed with koine.
After optional leading ASCII whitespace:

    <  >  .  ~  *  v  c  _  ^      single character opcodes
    @n                             rotate (n optional, 0 or absent means 1)
    //  /"lit"/                    split into characters / on a literal
    {_} {^} {%}                    map lower / upper / swap
    [v] [c] [_] [^]                filter vowel / consonant / lower / upper
    |a.b|                          slice, bounds optional, `-` from the back
    |n|                            index, `-` from the back
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from koine import Parser

from eolina.eolina_datatypes import (
    Check, Concat, Copy, Filter, In, Index, IsConso, IsLower, IsUpper, IsVowel,
    Join, Map, MapKind, Out, Rotate, Slice, Split, Token,
)
from eolina.eolina_errors import EmptyProgram, UnknownToken
from eolina.eolina_range import EolinaIndex, EolinaRange

log = logging.getLogger("eolina.tokenizer")
log.addHandler(logging.NullHandler())

GRAMMAR_PATH = Path(__file__).parent / "eolina_grammar.yaml"

# Same set as Rust/C "ASCII whitespace": no vertical tab.
WHITESPACE = " \t\n\x0c\r"

OPCODES: Dict[str, Token] = {
    "<": In(),
    ">": Out(),
    ".": Join(),
    "~": Concat(),
    "*": Copy(),
    "v": IsVowel(),
    "c": IsConso(),
    "_": IsLower(),
    "^": IsUpper(),
}

# Longest digit run accepted in a rotate count or a bound; CPython's default
# limit for converting decimal text to int.
MAX_DIGITS = 4300

_parser: Optional[Parser] = None


def token_parser() -> Parser:
    """The koine parser for one instruction, loaded once."""
    global _parser
    if _parser is None:
        _parser = Parser.from_file(str(GRAMMAR_PATH))
    return _parser


def _number(digits: str) -> int:
    if len(digits) > MAX_DIGITS:
        raise ValueError(f"number longer than {MAX_DIGITS} digits")
    return int(digits)


def _bound(text: str) -> Optional[Tuple[bool, int]]:
    """`(from_back, n)` for a signed bound; `None` if the bound is omitted."""
    if not text:
        return None
    if text.startswith("-"):
        return True, _number(text[1:])
    return False, _number(text)


def build_token(node: dict) -> Token:
    """
    Builds a token from the leaf node koine matched.

    Raises `ValueError` if a number is longer than `MAX_DIGITS`.
    """
    tag, text = node["tag"], node["text"]
    match tag:
        case "opcode":
            return OPCODES[text]
        case "rotate":
            count = _number(text[1:]) if len(text) > 1 else 0
            return Rotate(count or 1)
        case "split":
            return Split(text[2:-2] if len(text) > 2 else None)
        case "map":
            return Map(MapKind(text[1]))
        case "filter":
            return Filter(Check(text[1]))
        case "slice":
            start, end = text[1:-1].split(".")
            return Slice(EolinaRange.components(_bound(start), _bound(end)))
        case "index":
            return Index(EolinaIndex.from_components(*_bound(text[1:-1])))
    raise ValueError(f"unexpected grammar node: {tag}")


def skip_whitespace(program: str, pos: int = 0) -> int:
    """Returns the offset of the first non-whitespace character at or after `pos`."""
    return len(program) - len(program[pos:].lstrip(WHITESPACE))


def scan_token(program: str, pos: int = 0) -> Tuple[Token, int]:
    """
    Scans the token starting at `pos` (after any leading whitespace).

    Returns the token and the number of characters consumed from `pos`,
    whitespace included, so `pos + consumed` is where the next scan starts.
    Raises `EmptyProgram` if only whitespace remains and `UnknownToken` if
    the text at the cursor is not a token.
    """
    start = skip_whitespace(program, pos)
    if start >= len(program):
        raise EmptyProgram()

    parse_out = token_parser().parse(program[pos:])
    if parse_out.get("status") != "success":
        log.debug("no token at offset %d: %s", start, parse_out.get("message"))
        raise UnknownToken(program[start:])

    parts = parse_out["ast"]["children"]
    node = parts["token"]
    try:
        token = build_token(node)
    except ValueError as e:
        raise UnknownToken(program[start:]) from e
    return token, len(parts["whitespace"]["text"]) + len(node["text"])


def next_token(text: str) -> Tuple[str, Token, int]:
    """Scans the first token of `text`; returns `(remainder, token, consumed)`."""
    token, consumed = scan_token(text)
    return text[consumed:], token, consumed
