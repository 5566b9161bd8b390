"""
The Eolina function library.

Pure opcode implementations operating on `Value`s. Each function takes the
values the execution context popped and returns what it pushes back. None
of them touch the queue except `rotate`, and none perform I/O.
"""

from collections import deque
from typing import Callable, Dict, Optional, Tuple

from eolina import eolina_ascii as ascii_
from eolina.eolina_datatypes import (
    Bool, Check, MapKind, SEQUENCE_KINDS, String, StringList, Value,
)
from eolina.eolina_errors import ArgMismatch, Mismatch, OutOfTargetRange
from eolina.eolina_range import EolinaIndex, EolinaRange

CHECKS: Dict[Check, Callable[[str], bool]] = {
    Check.VOWEL: ascii_.is_vowel,
    Check.CONSO: ascii_.is_conso,
    Check.LOWER: ascii_.is_lower,
    Check.UPPER: ascii_.is_upper,
}

MAPS: Dict[MapKind, Callable[[str], str]] = {
    MapKind.LOWER: ascii_.to_lower,
    MapKind.UPPER: ascii_.to_upper,
    MapKind.SWAP: ascii_.swap_case,
}


def split(value: Value, literal: Optional[str] = None) -> Value:
    """
    Splits a `String` into a `StringList`.

    Without a literal (or with the empty literal) every character becomes
    its own element. Otherwise the string is split on the literal and empty
    fragments are dropped.
    """
    text = value.unwrap_string()
    if not literal:
        return StringList(tuple(text))
    return StringList(tuple(part for part in text.split(literal) if part))


def join(value: Value) -> Value:
    return String("".join(value.unwrap_string_list()))


def concat(left: Value, right: Value) -> Value:
    """Appends `right` to `left`; both must be strings or both string lists."""
    match (left, right):
        case (String(), String()):
            return String(left.value + right.value)
        case (StringList(), StringList()):
            return StringList(left.items + right.items)
        case (_, Bool()):
            raise ArgMismatch(SEQUENCE_KINDS, left.kind())
        case (Bool(), _):
            raise ArgMismatch(SEQUENCE_KINDS, right.kind())
        case _:
            raise Mismatch(left.kind(), right.kind(), SEQUENCE_KINDS)


def _check_all(value: Value, check: Callable[[str], bool]) -> Value:
    match value:
        case String():
            return Bool(check(value.value))
        case StringList():
            return Bool(all(check(item) for item in value.items))
    raise ArgMismatch(SEQUENCE_KINDS, value.kind())


def is_vowel(value: Value) -> Value:
    return _check_all(value, ascii_.is_vowel)


def is_conso(value: Value) -> Value:
    return _check_all(value, ascii_.is_conso)


def is_upper(value: Value) -> Value:
    return _check_all(value, ascii_.is_upper)


def is_lower(value: Value) -> Value:
    return _check_all(value, ascii_.is_lower)


def map_(value: Value, kind: MapKind) -> Value:
    """Transforms every character of a `String`, or of every `StringList` element."""
    transform = MAPS[kind]
    match value:
        case String():
            return String(transform(value.value))
        case StringList():
            return StringList(tuple(transform(item) for item in value.items))
    raise ArgMismatch(SEQUENCE_KINDS, value.kind())


def filter_(value: Value, check: Check) -> Value:
    """Keeps the characters (`String`) or elements (`StringList`) passing `check`, in order."""
    predicate = CHECKS[check]
    match value:
        case String():
            return String("".join(ch for ch in value.value if predicate(ch)))
        case StringList():
            return StringList(tuple(item for item in value.items if predicate(item)))
    raise ArgMismatch(SEQUENCE_KINDS, value.kind())


def slice_(value: Value, rng: EolinaRange) -> Value:
    bounds = rng.resolve(value.unwrap_len())
    match value:
        case String():
            return String(value.value[bounds.start:bounds.stop])
        case StringList():
            return StringList(value.items[bounds.start:bounds.stop])
    raise ArgMismatch(SEQUENCE_KINDS, value.kind())


def index(value: Value, idx: EolinaIndex) -> Value:
    """
    Picks one character of a `String` or one element of a `StringList`.

    A bound that resolves to the length itself (`-0` for example) addresses
    nothing and is out of range.
    """
    length = value.unwrap_len()
    pos = idx.to_absolute(length)
    if pos == length:
        raise OutOfTargetRange(idx, (pos, pos + 1), (0, length))
    match value:
        case String():
            return String(value.value[pos])
        case StringList():
            return String(value.items[pos])
    raise ArgMismatch(SEQUENCE_KINDS, value.kind())


def copy(value: Value) -> Tuple[Value, Value]:
    return value, value.clone()


def rotate(queue: deque, count: int) -> None:
    """Rotates the queue left by `count`; the front moves to the back."""
    if queue:
        queue.rotate(-(count % len(queue)))
