"""
Defines the error taxonomy for the Eolina interpreter.

Every failure the core can raise derives from `EolinaError`. Parse errors
are kept apart from execution errors so a host can reject a program before
it touches the value queue.
"""

from typing import Any, Sequence, Tuple


class EolinaError(Exception):
    """Base class for all errors raised by the Eolina core."""
    pass


class GeneratorExhausted(RuntimeError):
    """Raised when a completed generator or context is resumed without a reset."""
    def __init__(self, what: str = "generator"):
        super().__init__(f"resumed {what} after completion without reset")


# =================================================================
# Parse Errors
# =================================================================

class ParseError(EolinaError):
    """A program (or its remainder) could not be tokenized."""
    pass


class EmptyProgram(ParseError):
    def __init__(self):
        super().__init__("empty program")


class UnknownToken(ParseError):
    def __init__(self, text: str):
        super().__init__(f"unknown token at `{text}`")
        self.text = text


# =================================================================
# Range Errors
# =================================================================

def _fmt_bounds(bounds: Tuple[int, int]) -> str:
    return f"{bounds[0]}..{bounds[1]}"


class RangeError(EolinaError):
    """A relative index or range could not be resolved against a length."""
    pass


class OutOfTargetRange(RangeError):
    """
    At least one bound lies outside of `0..=len`.

    `given` is the relative index or range as written, `resolved` the best
    effort absolute `(start, end)` (which may be negative or past the end)
    and `valid` the `(0, len)` target range.
    """
    def __init__(self, given: Any, resolved: Tuple[int, int], valid: Tuple[int, int]):
        super().__init__(
            f"out of range: rel {given} => abs {_fmt_bounds(resolved)} vs valid {_fmt_bounds(valid)}"
        )
        self.given = given
        self.resolved = resolved
        self.valid = valid


class IncompatibleBounds(RangeError):
    """Both bounds are valid on their own but the start lies after the end."""
    def __init__(self, resolved: Tuple[int, int], valid: Tuple[int, int]):
        super().__init__(
            f"incompatible bounds: abs {_fmt_bounds(resolved)} (start > end) vs valid {_fmt_bounds(valid)}"
        )
        self.resolved = resolved
        self.valid = valid


# =================================================================
# Execution Errors
# =================================================================

class ArgMismatch(EolinaError):
    """A value popped from the queue was not of any of the expected kinds."""
    def __init__(self, expected: Sequence[Any], actual: Any):
        self.expected = tuple(expected)
        self.actual = actual
        super().__init__(self._describe())

    def _describe(self) -> str:
        if len(self.expected) == 1:
            return f"arg mismatch: expected `{self.expected[0]}`, found `{self.actual}`"
        listed = ", ".join(f"`{kind}`" for kind in self.expected)
        return f"arg mismatch: expected any of {listed}, found `{self.actual}`"


class Mismatch(ArgMismatch):
    """
    Two values that must share a kind did not.

    Both operands are individually acceptable, so this is also an
    `ArgMismatch` whose `actual` is the right hand kind.
    """
    def __init__(self, left: Any, right: Any, expected: Sequence[Any] = ()):
        self.left = left
        self.right = right
        super().__init__(expected, right)

    def _describe(self) -> str:
        return f"type mismatch: `{self.left}` != `{self.right}`"


class QueueTooShort(EolinaError):
    def __init__(self, needed: int, have: int):
        super().__init__(f"queue too short: needed {needed} value(s), found {have}")
        self.needed = needed
        self.have = have
