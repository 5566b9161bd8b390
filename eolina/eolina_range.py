"""
Relative indices and ranges.

An Eolina bound is either absolute from the front (`3`) or a magnitude
from the back (`-3`). `-0` is a valid bound meaning "the length" and stays
distinct from `0`, which is why bounds are not plain integers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from eolina.eolina_errors import IncompatibleBounds, OutOfTargetRange


class EolinaIndex(ABC):
    """A relative bound, resolved against a concrete length."""

    n: int

    @abstractmethod
    def offset(self, length: int) -> int:
        """Absolute position for `length`; may fall outside `0..=length`."""
        raise NotImplementedError

    def to_absolute(self, length: int) -> int:
        """Resolves this bound, raising `OutOfTargetRange` unless it lies in `0..=length`."""
        pos = self.offset(length)
        if 0 <= pos <= length:
            return pos
        raise OutOfTargetRange(self, (pos, pos), (0, length))

    @staticmethod
    def from_components(from_back: bool, n: int) -> 'EolinaIndex':
        """`End(n)` for a `-` signed bound, so `-0` stays distinct from `0`."""
        return End(n) if from_back else Start(n)


@dataclass(frozen=True)
class Start(EolinaIndex):
    n: int

    def offset(self, length: int) -> int:
        return self.n

    def __str__(self):
        return str(self.n)


@dataclass(frozen=True)
class End(EolinaIndex):
    n: int

    def offset(self, length: int) -> int:
        return length - self.n

    def __str__(self):
        return f"-{self.n}"


@dataclass(frozen=True)
class EolinaRange:
    """
    A relative range `|s.e|` with optional bounds.

    `start` defaults to 0 and `end` to the length. Resolution never clamps:
    it either returns `start..end` inside `0..=len` or raises one of the two
    `RangeError` kinds.
    """
    start: Optional[EolinaIndex] = None
    end: Optional[EolinaIndex] = None

    @classmethod
    def components(cls, start: Optional[Tuple[bool, int]], end: Optional[Tuple[bool, int]]) -> 'EolinaRange':
        return cls(
            EolinaIndex.from_components(*start) if start is not None else None,
            EolinaIndex.from_components(*end) if end is not None else None,
        )

    def resolve(self, length: int) -> range:
        lower = self.start.offset(length) if self.start is not None else 0
        upper = self.end.offset(length) if self.end is not None else length

        valid = (0, length)
        if not (0 <= lower <= length) or not (0 <= upper <= length):
            raise OutOfTargetRange(self, (lower, upper), valid)
        if lower > upper:
            raise IncompatibleBounds((lower, upper), valid)
        return range(lower, upper)

    def __str__(self):
        start = str(self.start) if self.start is not None else ""
        end = str(self.end) if self.end is not None else ""
        return f"|{start}.{end}|"
