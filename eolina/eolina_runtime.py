# eolina_runtime.py

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, List, Literal, Optional, Sequence

from eolina.eolina_context import ExecutionContext
from eolina.eolina_datatypes import SourceSpan, Value
from eolina.eolina_errors import ParseError, RangeError, UnknownToken
from eolina.eolina_io import Io
from eolina.eolina_tokenizer import skip_whitespace


# ===================================================================
# Error Formatting
# ===================================================================

def error_label(error: BaseException) -> str:
    """The category shown in front of an error message."""
    match error:
        case ParseError():
            return "ParseError"
        case RangeError():
            return "RangeError"
        case OSError() | EOFError():
            return "IoError"
    return type(error).__name__


def line_col(source: str, offset: int) -> tuple[int, int]:
    """1-based line and column of `offset`."""
    line = source.count("\n", 0, offset) + 1
    col = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, col


def source_context(source: str, line: int, col: Optional[int], width: int = 1, radius: int = 2) -> str:
    lines = source.splitlines()
    if not line or line < 1 or line > len(lines):
        return ""
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    digits = len(str(end))
    out = []
    for i in range(start, end + 1):
        prefix = ">" if i == line else " "
        ln = str(i).rjust(digits)
        content = lines[i - 1]
        out.append(f"{prefix} {ln} | {content}")
        if i == line and col is not None:
            caret = " " * max(col - 1, 0)
            carets = "^" * max(min(width, len(content) - col + 1), 1)
            out.append(f"  {' ' * digits} | {caret}{carets}")
    return "\n".join(out)


def format_error(error: BaseException, span: Optional[SourceSpan] = None) -> str:
    """Formats an error with the line, column and an excerpt of the failing token if known."""
    msg = f"{error_label(error)}: {error}"
    if span is None or not span.program.strip():
        return msg
    start = skip_whitespace(span.program, span.start)
    if start >= len(span.program):
        return msg
    width = max(span.end - start, 1)
    line, col = line_col(span.program, start)
    return f"{msg} (line {line}, col {col})\n{source_context(span.program, line, col, width)}"


# ===================================================================
# Batch Execution
# ===================================================================

@dataclass
class ExecutionResult:
    """The structured result of a program execution."""
    status: Literal['success', 'error']
    queue: List[Value] = field(default_factory=list)
    error: Optional[BaseException] = None
    error_span: Optional[SourceSpan] = None

    @property
    def ok(self) -> bool:
        return self.status == 'success'

    def format_error(self) -> str:
        if self.status != 'error':
            return ""
        return format_error(self.error, self.error_span)


class ProgramRunner:
    """
    Runs whole programs to completion against a queue it keeps between runs.

    Inputs are handed to `<` in the order given. Errors are never raised;
    they come back in the `ExecutionResult`.
    """

    def __init__(self, io: Optional[Io] = None, logger: Optional[logging.Logger] = None):
        self.io = io or Io()
        self.logger = logger
        self.queue: Deque[Value] = deque()

    def clear(self):
        self.queue.clear()

    def context(self, program: str, inputs: Optional[Sequence[str]] = None,
                eager: bool = False, interactive: bool = False) -> ExecutionContext:
        # `<` pops from the back, so the first input goes last.
        args = list(reversed(inputs)) if inputs else None
        return ExecutionContext(
            program, self.queue, self.io, args,
            interactive=interactive, eager=eager, logger=self.logger,
        )

    def run(self, program: str, inputs: Optional[Sequence[str]] = None, eager: bool = False) -> ExecutionResult:
        """The main entry point to execute a program."""
        try:
            ctx = self.context(program, inputs, eager=eager)
        except ParseError as e:
            return ExecutionResult(
                status='error',
                queue=list(self.queue),
                error=e,
                error_span=parse_error_span(program, e),
            )

        completed = ctx.run()
        if completed.ok:
            return ExecutionResult(status='success', queue=list(self.queue))
        return ExecutionResult(
            status='error',
            queue=list(self.queue),
            error=completed.error,
            error_span=ctx.span,
        )

    def run_file(self, path: str, inputs: Optional[Sequence[str]] = None) -> ExecutionResult:
        source = Path(path).read_text(encoding="utf-8")
        return self.run(source, inputs)


def parse_error_span(program: str, error: ParseError) -> SourceSpan:
    """Locates the unparsable remainder of `program` for a parse error."""
    if isinstance(error, UnknownToken) and program.endswith(error.text):
        start = len(program) - len(error.text)
        return SourceSpan(program, start, len(error.text))
    return SourceSpan(program, 0, len(program))
