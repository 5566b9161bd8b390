"""
The Eolina execution context.

An `ExecutionContext` owns the program text and drives a token generator
over it, one instruction per `resume()`. It is an explicit state machine:
every call either returns `Yielded(token, length)` for the instruction it
just executed or the terminal `Completed(error)`. The REPL steps it one
instruction at a time and the batch runner loops it to completion; both go
through the same `resume()`.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional

from eolina import eolina_functions as func
from eolina.eolina_datatypes import (
    Concat, Copy, Filter, In, Index, IsConso, IsLower, IsUpper, IsVowel, Join,
    Map, Out, Rotate, Slice, SourceSpan, Split, String, Token, Value,
)
from eolina.eolina_errors import EolinaError, GeneratorExhausted, QueueTooShort
from eolina.eolina_generator import Completed, EagerGen, Gen, LazyGen, State
from eolina.eolina_io import Io, OutputKind
from eolina.eolina_printer import Printer

log = logging.getLogger("eolina.context")
log.addHandler(logging.NullHandler())

# Errors that end a run. I/O failures from the collaborator are kept as is.
TERMINAL_ERRORS = (EolinaError, OSError, EOFError)


class ExecutionContext:
    """
    Executes one program against a value queue.

    `queue` is borrowed from the host and survives the context, so a REPL
    can keep its values across lines. `args` is consumed back to front by
    `<` before falling back to `io.read_line`. With `eager=True` the whole
    program is tokenized up front and a `ParseError` is raised from the
    constructor, before the queue is touched.
    """

    def __init__(self, program: str,
                 queue: Optional[Deque[Value]] = None,
                 io: Optional[Io] = None,
                 args: Optional[List[str]] = None,
                 interactive: bool = False,
                 eager: bool = False,
                 logger: Optional[logging.Logger] = None):
        self.program = program
        self.gen: Gen = EagerGen(program) if eager else LazyGen(program)
        self.queue: Deque[Value] = queue if queue is not None else deque()
        self.io = io or Io()
        self.args = args
        self.interactive = interactive
        self.logger = logger or log
        self.printer = Printer()

        # Offset of the next instruction, and the span of the current one.
        self.offset = 0
        self.span = SourceSpan(program, 0, 0)
        self.result: Optional[Completed] = None

    @property
    def completed(self) -> bool:
        return self.result is not None

    def context_line(self, styled: bool = False) -> str:
        """The program with the active token marked, colored by the collaborator if `styled`."""
        if styled:
            return self.io.highlight(self.span)
        return str(self.span)

    # --- Queue helpers ---

    def _pop(self, needed: int) -> List[Value]:
        """Pops `needed` values off the front, or nothing at all if there are too few."""
        have = len(self.queue)
        if have < needed:
            raise QueueTooShort(needed, have)
        return [self.queue.popleft() for _ in range(needed)]

    def _push(self, *values: Value):
        self.queue.extend(values)
        self._log_queue()

    def _log_queue(self):
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("[%s]: queue: %s", self.context_line(), self.printer.pformat(self.queue))

    # --- I/O ---

    def _prompt_context(self) -> Optional[SourceSpan]:
        return self.span if self.interactive else None

    def _read(self) -> str:
        if self.args:
            return self.args.pop()
        return self.io.read_line(self._prompt_context())

    # --- Dispatch ---

    def exec_token(self, token: Token):
        """Executes one instruction against the queue."""
        match token:
            case In():
                self._push(String(self._read()))
            case Out():
                [value] = self._pop(1)
                self.io.write(OutputKind.OUTPUT, self._prompt_context(), value)
                self._log_queue()
            case Split(literal=literal):
                [value] = self._pop(1)
                self._push(func.split(value, literal))
            case Join():
                [value] = self._pop(1)
                self._push(func.join(value))
            case Concat():
                left, right = self._pop(2)
                self._push(func.concat(left, right))
            case Copy():
                [value] = self._pop(1)
                self._push(*func.copy(value))
            case IsVowel():
                [value] = self._pop(1)
                self._push(func.is_vowel(value))
            case IsConso():
                [value] = self._pop(1)
                self._push(func.is_conso(value))
            case IsUpper():
                [value] = self._pop(1)
                self._push(func.is_upper(value))
            case IsLower():
                [value] = self._pop(1)
                self._push(func.is_lower(value))
            case Rotate(count=count):
                func.rotate(self.queue, count)
                self._log_queue()
            case Map(kind=kind):
                [value] = self._pop(1)
                self._push(func.map_(value, kind))
            case Filter(check=check):
                [value] = self._pop(1)
                self._push(func.filter_(value, check))
            case Slice(range=rng):
                [value] = self._pop(1)
                self._push(func.slice_(value, rng))
            case Index(index=idx):
                [value] = self._pop(1)
                self._push(func.index(value, idx))
            case _:
                raise TypeError(f"not an Eolina token: {token!r}")

    # --- The state machine ---

    def resume(self) -> State:
        """
        Parses and executes the next instruction.

        Returns `Yielded` after a successful instruction and `Completed`
        once the program ends or an instruction fails; no instruction runs
        after a failure. Raises `GeneratorExhausted` if resumed again after
        completion.
        """
        if self.result is not None:
            raise GeneratorExhausted("execution context")

        state = self.gen.resume()
        if isinstance(state, Completed):
            if not state.ok:
                # Point diagnostics at the text that failed to tokenize.
                self.span = SourceSpan(self.program, self.offset, len(self.program) - self.offset)
            self.result = state
            return state

        self.span = SourceSpan(self.program, self.offset, state.length)
        try:
            self.exec_token(state.token)
        except TERMINAL_ERRORS as e:
            self.result = Completed(e)
            return self.result
        finally:
            self.offset += state.length
        return state

    step = resume

    def run(self) -> Completed:
        """Resumes until completion and returns the terminal state."""
        while True:
            state = self.resume()
            if isinstance(state, Completed):
                return state
