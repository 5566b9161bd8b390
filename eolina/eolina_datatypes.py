"""
Defines the core data types for the Eolina runtime.

This module provides the runtime-tagged `Value` hierarchy the queue holds,
the closed set of `Token` variants the tokenizer produces, and the
`SourceSpan` hosts use to highlight the instruction being executed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from eolina.eolina_errors import ArgMismatch
from eolina.eolina_range import EolinaIndex, EolinaRange


class Kind(Enum):
    """The discriminant of a `Value`."""
    STRING = "String"
    STRING_LIST = "StringList"
    BOOL = "Bool"

    def __str__(self):
        return self.value


SEQUENCE_KINDS = (Kind.STRING, Kind.STRING_LIST)


# =================================================================
# Values
# =================================================================

class Value(ABC):
    """A value on the queue. Exactly one of `String`, `StringList`, `Bool`."""

    @abstractmethod
    def kind(self) -> Kind:
        raise NotImplementedError

    def clone(self) -> 'Value':
        return replace(self)

    def unwrap_string(self) -> str:
        raise ArgMismatch((Kind.STRING,), self.kind())

    def unwrap_string_list(self) -> Tuple[str, ...]:
        raise ArgMismatch((Kind.STRING_LIST,), self.kind())

    def unwrap_bool(self) -> bool:
        raise ArgMismatch((Kind.BOOL,), self.kind())

    def unwrap_len(self) -> int:
        """Character count of a `String` or element count of a `StringList`."""
        raise ArgMismatch(SEQUENCE_KINDS, self.kind())


@dataclass(frozen=True)
class String(Value):
    value: str

    def kind(self) -> Kind:
        return Kind.STRING

    def unwrap_string(self) -> str:
        return self.value

    def unwrap_len(self) -> int:
        return len(self.value)

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class StringList(Value):
    items: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any iterable of str but always store a tuple.
        object.__setattr__(self, "items", tuple(self.items))

    def kind(self) -> Kind:
        return Kind.STRING_LIST

    def unwrap_string_list(self) -> Tuple[str, ...]:
        return self.items

    def unwrap_len(self) -> int:
        return len(self.items)

    def __str__(self):
        return "[" + ", ".join(self.items) + "]"


@dataclass(frozen=True)
class Bool(Value):
    value: bool

    def kind(self) -> Kind:
        return Kind.BOOL

    def unwrap_bool(self) -> bool:
        return self.value

    def __str__(self):
        return "true" if self.value else "false"


# =================================================================
# Token Arguments
# =================================================================

class Check(Enum):
    """A character predicate, used by `[x]` filters."""
    VOWEL = "v"
    CONSO = "c"
    LOWER = "_"
    UPPER = "^"

    def __str__(self):
        return f"[{self.value}]"


class MapKind(Enum):
    """A character transform, used by `{x}` maps."""
    LOWER = "_"
    UPPER = "^"
    SWAP = "%"

    def __str__(self):
        return f"{{{self.value}}}"


# =================================================================
# Tokens
# =================================================================

class Token(ABC):
    """A single parsed instruction. `str()` renders its source form."""
    pass


@dataclass(frozen=True)
class In(Token):
    def __str__(self):
        return "<"


@dataclass(frozen=True)
class Out(Token):
    def __str__(self):
        return ">"


@dataclass(frozen=True)
class Split(Token):
    literal: Optional[str] = None

    def __str__(self):
        if self.literal is None:
            return "//"
        return f'/"{self.literal}"/'


@dataclass(frozen=True)
class Join(Token):
    def __str__(self):
        return "."


@dataclass(frozen=True)
class Concat(Token):
    def __str__(self):
        return "~"


@dataclass(frozen=True)
class Copy(Token):
    def __str__(self):
        return "*"


@dataclass(frozen=True)
class IsVowel(Token):
    def __str__(self):
        return "v"


@dataclass(frozen=True)
class IsConso(Token):
    def __str__(self):
        return "c"


@dataclass(frozen=True)
class IsLower(Token):
    def __str__(self):
        return "_"


@dataclass(frozen=True)
class IsUpper(Token):
    def __str__(self):
        return "^"


@dataclass(frozen=True)
class Rotate(Token):
    count: int = 1

    def __str__(self):
        return f"@{self.count}"


@dataclass(frozen=True)
class Map(Token):
    kind: MapKind

    def __str__(self):
        return str(self.kind)


@dataclass(frozen=True)
class Filter(Token):
    check: Check

    def __str__(self):
        return str(self.check)


@dataclass(frozen=True)
class Slice(Token):
    range: EolinaRange

    def __str__(self):
        return str(self.range)


@dataclass(frozen=True)
class Index(Token):
    index: EolinaIndex

    def __str__(self):
        return f"|{self.index}|"


# =================================================================
# Source Spans
# =================================================================

@dataclass(frozen=True)
class SourceSpan:
    """
    The `(start, length)` of the active token inside `program`.

    Holds a reference to the one program string rather than a copy of the
    token text; `parts()` splits it into executed, active and pending text.
    """
    program: str
    start: int = 0
    length: int = 0

    @property
    def end(self) -> int:
        return self.start + self.length

    def parts(self) -> Tuple[str, str, str]:
        return (
            self.program[:self.start],
            self.program[self.start:self.end],
            self.program[self.end:],
        )

    def __str__(self):
        done, active, rest = self.parts()
        return f"{done}'{active}'{rest}"
