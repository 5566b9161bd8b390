"""
The I/O collaborator handed to an execution context.

The context only ever calls `read_line(prompt_context)` for `<` and
`write(kind, prompt_context, value)` for `>`. Prompt templates, colors and
stream selection all live here, driven by an `IoConfig`.
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Any, Optional, TextIO

import pystache
from colorama import Fore, Style, just_fix_windows_console

from eolina.eolina_config import IoConfig, Mode
from eolina.eolina_datatypes import SourceSpan


class OutputKind(IntEnum):
    """What is being written; everything above OUTPUT is a log message on stderr."""
    OUTPUT = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


# prompt key -> (tag, color)
_TAGS = {
    "input": ("inp", Fore.GREEN),
    "output": ("out", Fore.GREEN),
    "info": ("inf", Fore.GREEN),
    "warning": ("wrn", Fore.YELLOW),
    "error": ("err", Fore.RED),
}

_KIND_KEYS = {
    OutputKind.OUTPUT: "output",
    OutputKind.INFO: "info",
    OutputKind.WARNING: "warning",
    OutputKind.ERROR: "error",
}


class Io:
    """Reads program input and writes program output for the standard streams (or stand-ins)."""

    def __init__(self, config: Optional[IoConfig] = None,
                 stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None):
        self.config = config or IoConfig()
        # Streams are looked up lazily so test harnesses can swap sys.std*.
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr
        self._renderer = pystache.Renderer(escape=lambda u: u)
        if self.config.color:
            just_fix_windows_console()

    @property
    def stdin(self) -> TextIO:
        return self._stdin or sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    # --- Styling ---

    def _paint(self, text: str, color: str) -> str:
        if not self.config.color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def highlight(self, span: SourceSpan) -> str:
        """Renders the program with the active token marked."""
        if not self.config.color:
            return str(span)
        done, active, rest = span.parts()
        return (
            self._paint(done, Fore.GREEN)
            + self._paint(active, Fore.CYAN)
            + self._paint(rest, Style.DIM)
        )

    def render_prompt(self, key: str, span: Optional[SourceSpan] = None) -> str:
        tag, color = _TAGS[key]
        context = {
            "tag": self._paint(tag, color),
            "context": self.highlight(span) if span is not None else "",
        }
        return self._renderer.render(self.config.prompts[key], context)

    # --- The collaborator contract ---

    def read_line(self, prompt_context: Optional[SourceSpan] = None) -> str:
        """
        Reads one line, without its trailing newline.

        When a prompt context is given and prompts are enabled, the input
        prompt is written to stderr first. Raises `EOFError` at end of input.
        """
        if prompt_context is not None and self.config.mode >= Mode.PROMPTED:
            self.stderr.write(self.render_prompt("input", prompt_context))
            self.stderr.flush()

        line = self.stdin.readline()
        if line == "":
            raise EOFError("end of input")
        if line.endswith("\n"):
            line = line[:-1]
        return line

    def write(self, kind: OutputKind, prompt_context: Optional[SourceSpan], value: Any) -> None:
        """Writes `value` as one line to stdout (OUTPUT) or stderr (log kinds)."""
        mode = self.config.mode
        if mode == Mode.MUTED or (mode == Mode.LEAN and kind > OutputKind.OUTPUT):
            return

        stream = self.stdout if kind == OutputKind.OUTPUT else self.stderr
        prefix = ""
        if mode >= Mode.PROMPTED and (prompt_context is not None or kind != OutputKind.OUTPUT):
            prefix = self.render_prompt(_KIND_KEYS[kind], prompt_context)

        stream.write(f"{prefix}{value}\n")
        stream.flush()

    def info(self, message: Any) -> None:
        self.write(OutputKind.INFO, None, message)

    def warning(self, message: Any) -> None:
        self.write(OutputKind.WARNING, None, message)

    def error(self, message: Any) -> None:
        self.write(OutputKind.ERROR, None, message)
