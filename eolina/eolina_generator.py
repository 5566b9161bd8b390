"""
Resumable token generators.

A generator is an explicit state machine: each `resume()` returns either
`Yielded(token, length)` or a terminal `Completed(error)`. Hosts drive it
with a loop, so stepping once and running to completion share one code
path. Both variants walk the program by offset and never copy it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from eolina.eolina_datatypes import Token
from eolina.eolina_errors import GeneratorExhausted, ParseError
from eolina.eolina_tokenizer import scan_token, skip_whitespace


@dataclass(frozen=True)
class Yielded:
    """A step produced (or executed) `token`, which spans `length` characters."""
    token: Token
    length: int


@dataclass(frozen=True)
class Completed:
    """The terminal state. `error` is None on success."""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self):
        if self.error is not None:
            raise self.error


State = Union[Yielded, Completed]


class Gen(ABC):
    """The resumable token sequence capability."""

    program: str

    @abstractmethod
    def resume(self) -> State:
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> None:
        """Rewinds to the start of the program."""
        raise NotImplementedError

    def __iter__(self):
        """Yields `(token, length)` pairs until completion, raising on a parse error."""
        while True:
            state = self.resume()
            if isinstance(state, Completed):
                state.raise_for_error()
                return
            yield state.token, state.length


class LazyGen(Gen):
    """Tokenizes on demand, one token per `resume()`."""

    def __init__(self, program: str):
        self.program = program
        self.cursor = 0
        self.completed = False

    def resume(self) -> State:
        if self.completed:
            raise GeneratorExhausted()

        if skip_whitespace(self.program, self.cursor) >= len(self.program):
            self.completed = True
            self.cursor = len(self.program)
            return Completed()

        try:
            token, consumed = scan_token(self.program, self.cursor)
        except ParseError as e:
            self.completed = True
            return Completed(e)

        self.cursor += consumed
        return Yielded(token, consumed)

    def reset(self) -> None:
        self.cursor = 0
        self.completed = False


class EagerGen(Gen):
    """
    Tokenizes the whole program up front.

    Construction raises the first `ParseError`, so a partially valid program
    is never accepted. `resume()` replays the collected tokens and `reset()`
    only rewinds the replay cursor.
    """

    def __init__(self, program: str):
        self.program = program
        self.tokens: List[Tuple[Token, int]] = list(LazyGen(program))
        self.yield_at = 0
        self.completed = False

    def resume(self) -> State:
        if self.completed:
            raise GeneratorExhausted()
        if self.yield_at == len(self.tokens):
            self.completed = True
            return Completed()
        token, length = self.tokens[self.yield_at]
        self.yield_at += 1
        return Yielded(token, length)

    def reset(self) -> None:
        self.yield_at = 0
        self.completed = False
